# storefront/errors.py
"""
Error taxonomy for the storefront API.

Every error raised by a route handler is a ``StorefrontError`` carrying
the HTTP status it maps to. ``main.py`` registers a single exception
handler that renders them as ``{"error": message}``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator


logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    status_code = 500
    kind = "storefront_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StorefrontError):
    """Malformed album id or request body."""

    status_code = 400
    kind = "validation_error"


class NotFoundError(StorefrontError):
    status_code = 404
    kind = "not_found"


class PreconditionError(StorefrontError):
    """The album exists but cannot be purchased (not released yet)."""

    status_code = 400
    kind = "precondition_failed"


class UpstreamError(StorefrontError):
    """The payment processor refused or failed the call."""

    status_code = 500
    kind = "upstream_error"


class InternalError(StorefrontError):
    status_code = 500
    kind = "internal_error"


class SeedingError(InternalError):
    kind = "seeding_error"


class ConfigError(Exception):
    """Raised at startup when required configuration is missing or invalid."""


@contextmanager
def internal_errors(message: str) -> Iterator[None]:
    """Turn unexpected exceptions into an ``InternalError(message)``.

    Client and upstream errors pass through untouched; internal ones are
    replaced so their details stay in the log.
    """
    try:
        yield
    except InternalError as exc:
        logger.error("%s: %s: %s", message, exc.kind, exc.message)
        raise InternalError(message) from exc
    except StorefrontError:
        raise
    except Exception as exc:
        logger.error("%s: %s: %s", message, type(exc).__name__, exc)
        raise InternalError(message) from exc
