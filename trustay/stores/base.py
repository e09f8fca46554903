"""
Shared plumbing for the resource stores.

A store call never raises: it flips a loading flag, clears its error field,
runs the client call and records a Vietnamese message in the error field when
the call fails.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Optional, Tuple, TypeVar

from trustay.error_handler import DEFAULT_ERROR_MESSAGE, extract_error_message

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseStore:
    # Overridden by stores whose endpoints have their own error wording
    error_message = staticmethod(extract_error_message)

    # HTTP status of the most recent failure (None for network errors and local validation)
    last_error_status: Optional[int] = None

    async def _guard(
        self,
        loading_attr: str,
        error_attr: str,
        operation: Callable[[], Awaitable[T]],
        default_error: str = DEFAULT_ERROR_MESSAGE,
    ) -> Tuple[bool, Optional[T]]:
        setattr(self, loading_attr, True)
        setattr(self, error_attr, None)
        self.last_error_status = None
        try:
            return True, await operation()
        except Exception as exc:
            message = self.error_message(exc, default_error)
            logger.warning("[%s] %s: %s", type(self).__name__, error_attr, message)
            setattr(self, error_attr, message)
            self.last_error_status = getattr(exc, "status", None)
            return False, None
        finally:
            setattr(self, loading_attr, False)

    def _reject(self, error_attr: str, errors: List[str]) -> bool:
        """Record local validation errors the way the backend reports a 400."""
        setattr(self, error_attr, "Dữ liệu không hợp lệ:\n" + "\n".join(errors))
        self.last_error_status = None
        return False
