import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from storefront.core.errors import LimitExceededError, NotFoundError, PaymentRequiredError

logger = logging.getLogger(__name__)


async def limit_exceeded_handler(request: Request, exc: LimitExceededError) -> JSONResponse:
    """Render a plan ceiling denial as 403 with the upgrade payload."""
    logger.info(f"Limit exceeded: {exc.payload.get('current')}/{exc.payload.get('limit')} - {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content=exc.payload,
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.warning(f"Not found: {exc}")
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


async def payment_required_handler(request: Request, exc: PaymentRequiredError) -> JSONResponse:
    logger.info(f"Payment required: {exc}")
    return JSONResponse(
        status_code=status.HTTP_402_PAYMENT_REQUIRED,
        content={"detail": str(exc)},
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle SQLAlchemy database errors."""
    logger.error(f"Database error: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred"},
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(LimitExceededError, limit_exceeded_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(PaymentRequiredError, payment_required_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
