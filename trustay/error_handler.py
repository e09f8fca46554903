"""Error handling helpers: backend errors, result wrappers and user-facing messages."""
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ERROR_MESSAGE = "Đã có lỗi xảy ra"

_STATUS_MESSAGES = {
    400: "Dữ liệu gửi lên không hợp lệ",
    409: "Dữ liệu đã tồn tại",
    422: "Dữ liệu không hợp lệ",
    500: "Lỗi máy chủ. Vui lòng thử lại sau",
}


class ApiError(Exception):
    """Raised by backend clients. status is None when the request never got a response."""

    def __init__(self, message: str, status: Optional[int] = None, payload: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload

    def __repr__(self) -> str:
        return f"ApiError(status={self.status!r}, message={self.message!r})"


@dataclass
class ApiResult(Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    status: Optional[int] = None

    @classmethod
    def ok(cls, data: T = None) -> "ApiResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, status: Optional[int] = None) -> "ApiResult[T]":
        return cls(success=False, error=error, status=status)

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        out: Dict[str, Any] = {"success": False, "error": self.error}
        if self.status is not None:
            out["status"] = self.status
        return out


def _payload_message(payload: Any) -> Optional[str]:
    if isinstance(payload, str):
        return payload or None
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error") or payload.get("msg")
        if isinstance(message, str):
            return message
        if isinstance(message, dict) and isinstance(message.get("message"), str):
            return message["message"]
    return None


def extract_error_message(exc: BaseException, default: str = DEFAULT_ERROR_MESSAGE) -> str:
    """Best human-readable message for a failed backend call."""
    if isinstance(exc, ApiError):
        return (
            _payload_message(exc.payload)
            or _STATUS_MESSAGES.get(exc.status)
            or exc.message
            or default
        )
    return str(exc) or default


def extract_contract_error_message(exc: BaseException, default: str = DEFAULT_ERROR_MESSAGE) -> str:
    """Contract endpoints answer with their own wording per status code."""
    if not isinstance(exc, ApiError):
        return str(exc) or default

    payload = exc.payload if isinstance(exc.payload, dict) else None
    message = payload.get("message") if payload else None

    if exc.status in (400, 422):
        if isinstance(message, list):
            return "Dữ liệu không hợp lệ:\n" + "\n".join(str(m) for m in message)
        if isinstance(message, str):
            return message
        return "Dữ liệu không hợp lệ"
    if exc.status == 401:
        return "Bạn cần đăng nhập để thực hiện thao tác này"
    if exc.status == 403:
        return "Bạn không có quyền thực hiện thao tác này"
    if exc.status == 404:
        return "Không tìm thấy hợp đồng"
    if exc.status == 409:
        return "Trạng thái hợp đồng không hợp lệ"

    if isinstance(message, str) and message:
        return message
    if payload and payload.get("error"):
        return str(payload["error"])
    return default


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception in Trustay operation: %s", exc, exc_info=True)
        return {
            "success": False,
            "toast": {"level": "error", "message": extract_error_message(exc)},
            "status": getattr(exc, "status", None),
            "metadata": {"error": str(exc), "context": context or {}},
        }
