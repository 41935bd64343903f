"""Typed errors raised by route handlers and rendered as failure envelopes."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base error carrying the HTTP status and public message.

    Attributes:
        status_code: HTTP status returned to the client.
        message: Message placed in the ``error`` field of the envelope.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(ApiError):
    status_code = 404


class StoreError(ApiError):
    status_code = 500


@asynccontextmanager
async def store_errors(message: str):
    """Translate store failures into a StoreError with a generic message."""
    try:
        yield
    except (SQLAlchemyError, OSError) as exc:
        # Drivers raise OSError (TimeoutError included) when the store is unreachable.
        logger.exception(message)
        raise StoreError(message) from exc
