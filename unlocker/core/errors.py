# unlocker/core/errors.py
from fastapi import HTTPException


class ServiceError(ValueError):
    """
    Error de negocio. Los services lanzan estas excepciones y el router
    las convierte en HTTPException con su status.
    """
    status_code = 400

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra


class NotFoundError(ServiceError):
    status_code = 404


class ForbiddenError(ServiceError):
    status_code = 403


class ConflictError(ServiceError):
    status_code = 409


class UnauthorizedError(ServiceError):
    status_code = 401


class EditWindowExpiredError(ForbiddenError):
    def __init__(self, message: str = "Comments can only be edited within 1 hour of posting"):
        super().__init__(message, editWindowExpired=True)


def to_http(e: ServiceError) -> HTTPException:
    detail: dict = {"error": e.message, **e.extra}
    return HTTPException(status_code=e.status_code, detail=detail)
