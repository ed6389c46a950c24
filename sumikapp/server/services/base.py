"""
Shared service plumbing.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from sqlalchemy.ext.asyncio import AsyncSession

from sumikapp.core.errors import SumikappError


class BaseService:
    """Base class for services bound to a database session."""

    def __init__(self, session: AsyncSession):
        self.session = session


@contextmanager
def logged_operation(logger: logging.Logger, action: str, ctx: Dict[str, Any]) -> Iterator[None]:
    """Log a failed operation with its context and re-raise.

    Domain errors are expected outcomes (a rejected transition, a missing row)
    and are logged at WARNING. Anything else is logged with the traceback.
    """
    try:
        yield
    except SumikappError as exc:
        logger.warning(f"{action} refused: {exc.message}", extra={"ctx": ctx})
        raise
    except Exception:
        logger.exception(f"{action} failed", extra={"ctx": ctx})
        raise
