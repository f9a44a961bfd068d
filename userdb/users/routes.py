import json
import logging
from typing import Any, List

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from userdb.database import UserStore
from userdb.errors import NotFoundError, ServerError, UserServiceError, ValidationError
from userdb.users.schemas import UserCreate, UserResponse
from userdb.users.utils import format_user, validate_user

logger = logging.getLogger(__name__)

router = APIRouter()

# Dependency returning the store handle created at startup
def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store

def _reject_constant(name: str):
    raise ValueError(f"Unexpected token {name} in JSON")

async def read_json_body(request: Request) -> Any:
    # Validation only ever sees a fully buffered body
    body = await request.body()
    # NaN and Infinity are not JSON
    return json.loads(body, parse_constant=_reject_constant)

def user_id_from_path(user_path: str) -> str:
    # The id is the segment right after /users/, taken verbatim
    return user_path.split("/")[0]


@router.get("", response_model=List[UserResponse])
async def list_users(store: UserStore = Depends(get_user_store)):
    """
    Retrieve every stored user.
    """
    try:
        users = await store.find_all()
        content = [format_user(user).model_dump() for user in users]
    except Exception as e:
        logger.error(f"Listing users failed: {e}")
        raise ServerError(str(e))

    return JSONResponse(status_code=status.HTTP_200_OK, content=content)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(request: Request, store: UserStore = Depends(get_user_store)):
    """
    Validate the request body and insert it as a new user.
    """
    try:
        payload = await read_json_body(request)

        errors = validate_user(payload)
        if errors:
            logger.debug(f"Rejected new user: {errors}")
            raise ValidationError(errors)

        user = UserCreate.model_validate(payload)
        saved_user = await store.insert(user.model_dump())
        content = format_user(saved_user).model_dump()
    except UserServiceError:
        raise
    except Exception as e:
        logger.error(f"Creating user failed: {e}")
        raise ServerError(str(e))

    logger.info(f"Created user {content['id']}")
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=content)


@router.put("/{user_path:path}", response_model=UserResponse)
async def update_user(user_path: str, request: Request, store: UserStore = Depends(get_user_store)):
    """
    Replace every field of an existing user with the request body.
    """
    user_id = user_id_from_path(user_path)
    try:
        payload = await read_json_body(request)

        errors = validate_user(payload)
        if errors:
            # A missing user is reported as such even when the body is invalid
            if not await store.exists(user_id):
                raise NotFoundError()
            logger.debug(f"Rejected replacement for user {user_id}: {errors}")
            raise ValidationError(errors)

        user = UserCreate.model_validate(payload)
        updated_user = await store.find_by_id_and_replace(user_id, user.model_dump())
        if updated_user is None:
            raise NotFoundError()
        content = format_user(updated_user).model_dump()
    except NotFoundError:
        logger.info(f"User {user_id} not found for update")
        raise
    except UserServiceError:
        raise
    except Exception as e:
        logger.error(f"Updating user {user_id} failed: {e}")
        raise ServerError(str(e))

    logger.info(f"Replaced user {user_id}")
    return JSONResponse(status_code=status.HTTP_200_OK, content=content)


@router.delete("/{user_path:path}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_path: str, store: UserStore = Depends(get_user_store)):
    """
    Remove a user by id.
    """
    user_id = user_id_from_path(user_path)
    try:
        deleted_user = await store.find_by_id_and_delete(user_id)
    except Exception as e:
        logger.error(f"Deleting user {user_id} failed: {e}")
        raise ServerError(str(e))

    if deleted_user is None:
        logger.info(f"User {user_id} not found for delete")
        raise NotFoundError()

    logger.info(f"Deleted user {user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT, media_type="application/json")
