from typing import List, Optional


class UserServiceError(Exception):
    """
    Base class for errors that end a request with a JSON error body.

    Subclasses set ``status_code`` and implement ``body()``.
    """
    status_code = 500

    def body(self) -> dict:
        raise NotImplementedError


class ValidationError(UserServiceError):
    status_code = 400

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)

    def body(self) -> dict:
        return {"errors": self.errors}


class NotFoundError(UserServiceError):
    status_code = 404
    message = "User not found"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)

    def body(self) -> dict:
        return {"message": self.message}


class RouteNotFoundError(NotFoundError):
    message = "Route not found"


class ServerError(UserServiceError):
    status_code = 500
    message = "Server error"

    def __init__(self, error: str):
        super().__init__(error)
        self.error = error

    def body(self) -> dict:
        return {"message": self.message, "error": self.error}
