from trustay.error_handler import (
    DEFAULT_ERROR_MESSAGE,
    ApiError,
    ApiResult,
    ErrorHandler,
    extract_contract_error_message,
    extract_error_message,
)


def test_handle_exception_returns_payload():
    eh = ErrorHandler()
    out = eh.handle_exception(Exception("boom"), context={"k": "v"})
    assert out["success"] is False
    assert out["toast"] == {"level": "error", "message": "boom"}
    assert "boom" in out["metadata"]["error"]
    assert out["metadata"]["context"] == {"k": "v"}


def test_extract_error_message_prefers_backend_payload():
    exc = ApiError("Request failed", status=409, payload={"message": "Hoá đơn đã tồn tại"})
    assert extract_error_message(exc) == "Hoá đơn đã tồn tại"

    nested = ApiError("x", status=400, payload={"error": {"message": "Sai định dạng"}})
    assert extract_error_message(nested) == "Sai định dạng"


def test_extract_error_message_falls_back_to_status_then_default():
    assert extract_error_message(ApiError("", status=500, payload=None)) == "Lỗi máy chủ. Vui lòng thử lại sau"
    assert extract_error_message(ApiError("Network error")) == "Network error"
    assert extract_error_message(ApiError("")) == DEFAULT_ERROR_MESSAGE
    assert extract_error_message(ValueError(), "Không thể tải") == "Không thể tải"


def test_contract_messages_per_status():
    def message(status, payload=None):
        return extract_contract_error_message(ApiError("x", status=status, payload=payload))

    assert message(400, {"message": ["startDate is required", "tenantId is required"]}) == (
        "Dữ liệu không hợp lệ:\nstartDate is required\ntenantId is required"
    )
    assert message(400, {"message": "Mã OTP không hợp lệ"}) == "Mã OTP không hợp lệ"
    assert message(422) == "Dữ liệu không hợp lệ"
    assert message(401) == "Bạn cần đăng nhập để thực hiện thao tác này"
    assert message(403) == "Bạn không có quyền thực hiện thao tác này"
    assert message(404) == "Không tìm thấy hợp đồng"
    assert message(409) == "Trạng thái hợp đồng không hợp lệ"
    assert message(500, {"message": "Database down"}) == "Database down"
    assert message(502, {"error": "Bad Gateway"}) == "Bad Gateway"
    assert message(503) == DEFAULT_ERROR_MESSAGE


def test_api_result_serialization():
    assert ApiResult.ok({"id": 1}).to_dict() == {"success": True, "data": {"id": 1}}
    assert ApiResult.fail("Không tìm thấy", status=404).to_dict() == {
        "success": False, "error": "Không tìm thấy", "status": 404,
    }
    assert "status" not in ApiResult.fail("Mất kết nối").to_dict()
