"""Calculation IDs for correlating the log records of one availability query.

A query fans out through window bridging, slot generation and conflict
filtering; every record emitted on the way carries the same ``request_id``.
``request_scope`` opens an ID for a block of work, and the handler installed
by ``bookable.config`` prints it as ``[%(request_id)s]``.

Usage:
    from bookable.logging_context import get_request_logger, request_scope

    logger = get_request_logger(__name__)
    with request_scope() as request_id:
        logger.info("Computing slots")  # [REQ-3f9c0a1b2d4e] Computing slots
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Iterator

NO_REQUEST_ID = "NO_REQUEST_ID"

_request_id: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST_ID)


def get_request_id() -> str:
    return _request_id.get()


def set_request_id(request_id: str) -> Token:
    """Set the ID for the current context, returning the ContextVar token."""
    return _request_id.set(request_id)


@contextmanager
def request_scope(prefix: str = "REQ") -> Iterator[str]:
    """Run a block of work under one request ID.

    Inside an enclosing scope the caller's ID is kept, so a CLI run and the
    calculator calls it makes share one ID. Otherwise a fresh ID is set for
    the block and cleared again on exit.
    """
    current = _request_id.get()
    if current != NO_REQUEST_ID:
        yield current
        return

    token = set_request_id(f"{prefix}-{uuid.uuid4().hex[:12]}")
    try:
        yield _request_id.get()
    finally:
        _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Stamps the active request ID onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def get_request_logger(name: str) -> logging.Logger:
    """``logging.getLogger`` with a RequestIdFilter attached (once)."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
