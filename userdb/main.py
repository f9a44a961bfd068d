import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import config
from .database import UserStore, connect_user_store
from .errors import RouteNotFoundError, UserServiceError

# Importing route modules from different submodules
from .users.routes import router as users_router

# Set up logging
logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Connect to MongoDB unless a store was handed to create_app
    if app.state.user_store is None:
        app.state.user_store = await connect_user_store(config)
    logger.info(f"Server starting at http://localhost:{config.PORT}")

    yield

    app.state.user_store.close()


async def user_service_error_handler(request: Request, exc: UserServiceError):
    return JSONResponse(status_code=exc.status_code, content=exc.body())


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and unsupported methods on known paths are both unknown routes
    if exc.status_code in (404, 405):
        error = RouteNotFoundError()
        return JSONResponse(status_code=error.status_code, content=error.body())
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)


def create_app(user_store: UserStore = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        user_store (UserStore, optional): Store handle to serve requests with.
            When omitted, a MongoDB-backed store is connected at startup.

    Returns:
        FastAPI: The configured application.
    """
    # Trailing-slash redirects would turn unknown routes into 307s
    app = FastAPI(
        title="User Service",
        version="1.0.0",
        lifespan=lifespan,
        redirect_slashes=False,
        # Every path outside /users is an unknown route, docs included
        docs_url=None,
        redoc_url=None,
        openapi_url=None
    )
    app.state.user_store = user_store

    app.add_exception_handler(UserServiceError, user_service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    # Including routers with specified prefixes and tags
    app.include_router(users_router, prefix="/users", tags=["Users"])

    return app


# Create an instance of the application served by uvicorn
app = create_app()


def run():
    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
