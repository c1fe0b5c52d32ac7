from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from unioauth.core.config import auth_logger
from unioauth.core.exceptions.types import OAuthException


async def oauth_exception_handler(request: Request, exc: OAuthException):
    """
    Handles OAuth exceptions by returning a JSON response.

    Args:
        request: The request object.
        exc (OAuthException): The OAuth exception instance.

    Returns:
        JSONResponse: A response containing the error message, code and provider,
            with the exception's status code.
    """
    auth_logger.warning(
        f"OAuthException: provider={exc.provider}, code={exc.code}, message={exc}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": str(exc),
            "code": exc.code,
            "provider": exc.provider,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install the OAuth exception handler on a FastAPI application.

    Args:
        app (FastAPI): The host application.
    """
    app.add_exception_handler(OAuthException, oauth_exception_handler)  # type: ignore[arg-type]
