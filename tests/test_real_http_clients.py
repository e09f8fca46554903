import json

import httpx
import pytest

from trustay.error_handler import ApiError
from trustay.integrations.clients import select_backend, should_use_real_integrations
from trustay.integrations.clients.mocks import MockContractsClient
from trustay.integrations.clients.real_http import (
    BackendHttpClient,
    RealChatClient,
    RealContractsClient,
    RealNotificationsClient,
    RealRoommateApplicationsClient,
    TokenStore,
)
from trustay.integrations.contracts.interfaces import ContractStatus
from trustay.integrations.contracts.messaging import SendMessageRequest
from trustay.integrations.contracts.roommates import RespondToApplicationRequest
from trustay.integrations.contracts.signing import SignContractRequest
from trustay.utils.config_loader import AppConfig, BackendApiConfig, IntegrationsConfig

BASE_URL = "http://backend.test"


class Recorder:
    """Routes requests to a handler and keeps every request for assertions."""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


def http_client(handler, access_token="access-1", refresh_token=None):
    recorder = Recorder(handler)
    http = BackendHttpClient(
        base_url=BASE_URL,
        tokens=TokenStore(access_token=access_token, refresh_token=refresh_token),
        transport=httpx.MockTransport(recorder),
    )
    return http, recorder


@pytest.mark.asyncio
async def test_sign_posts_signature_and_otp_with_bearer_token():
    def handler(request):
        return httpx.Response(200, json={"data": {"id": "contract-1", "status": "partially_signed"}})

    http, recorder = http_client(handler)
    contract = await RealContractsClient(http).sign(
        "contract-1", SignContractRequest(signature_image="data:image/png;base64,abc", otp_code="123456")
    )

    assert contract.status == ContractStatus.PARTIALLY_SIGNED
    request = recorder.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/api/contracts/contract-1/sign"
    assert request.headers["Authorization"] == "Bearer access-1"
    assert json.loads(request.content) == {"signatureImage": "data:image/png;base64,abc", "otpCode": "123456"}


@pytest.mark.asyncio
async def test_list_contracts_drops_empty_params_and_reads_pagination():
    def handler(request):
        return httpx.Response(200, json={
            "data": [{"id": "contract-1", "status": "active"}],
            "pagination": {"page": 2, "limit": 10, "total": 11, "totalPages": 2},
        })

    http, recorder = http_client(handler)
    page = await RealContractsClient(http).list_contracts(page=2, limit=10, scope="tenant")

    assert recorder.requests[0].url.path == "/api/contracts/as-tenant"
    assert dict(recorder.requests[0].url.params) == {"page": "2", "limit": "10"}
    assert page.meta.total_pages == 2
    assert page.items[0].status == ContractStatus.ACTIVE


@pytest.mark.asyncio
async def test_unknown_list_scope_is_rejected():
    http, _ = http_client(lambda request: httpx.Response(200, json={}))

    with pytest.raises(ValueError):
        await RealContractsClient(http).list_contracts(scope="everyone")


@pytest.mark.asyncio
async def test_error_response_becomes_api_error_with_payload():
    def handler(request):
        return httpx.Response(400, json={"message": ["otpCode must be 6 digits"], "statusCode": 400})

    http, _ = http_client(handler)

    with pytest.raises(ApiError) as exc_info:
        await RealContractsClient(http).request_signing_otp("contract-1")

    assert exc_info.value.status == 400
    assert exc_info.value.payload["message"] == ["otpCode must be 6 digits"]
    assert exc_info.value.message == "Request failed with status code 400"


@pytest.mark.asyncio
async def test_expired_token_is_refreshed_once_and_request_replayed():
    def handler(request):
        if request.url.path == "/api/auth/refresh":
            assert json.loads(request.content) == {"refreshToken": "refresh-1"}
            return httpx.Response(200, json={"access_token": "access-2", "refresh_token": "refresh-2"})
        if request.headers.get("Authorization") == "Bearer access-2":
            return httpx.Response(200, json={"data": {"id": "contract-1", "status": "active"}})
        return httpx.Response(401, json={"message": "Unauthorized"})

    http, recorder = http_client(handler, refresh_token="refresh-1")
    contract = await RealContractsClient(http).get_contract("contract-1")

    assert contract.status == ContractStatus.ACTIVE
    assert [r.url.path for r in recorder.requests] == [
        "/api/contracts/contract-1", "/api/auth/refresh", "/api/contracts/contract-1",
    ]
    assert http.tokens.access_token == "access-2"
    assert http.tokens.refresh_token == "refresh-2"


@pytest.mark.asyncio
async def test_failed_refresh_clears_tokens_and_keeps_401():
    def handler(request):
        if request.url.path == "/api/auth/refresh":
            return httpx.Response(401, json={"message": "Refresh token expired"})
        return httpx.Response(401, json={"message": "Unauthorized"})

    http, recorder = http_client(handler, refresh_token="refresh-1")

    with pytest.raises(ApiError) as exc_info:
        await RealContractsClient(http).get_contract("contract-1")

    assert exc_info.value.status == 401
    assert len(recorder.requests) == 2
    assert http.tokens.access_token is None and http.tokens.refresh_token is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "refresh_reply",
    [
        lambda: httpx.Response(200, text="OK"),
        lambda: httpx.Response(200, json=["access-2"]),
    ],
)
async def test_unreadable_refresh_reply_clears_tokens_and_keeps_401(refresh_reply):
    def handler(request):
        if request.url.path == "/api/auth/refresh":
            return refresh_reply()
        return httpx.Response(401, json={"message": "Unauthorized"})

    http, recorder = http_client(handler, refresh_token="refresh-1")

    with pytest.raises(ApiError) as exc_info:
        await RealContractsClient(http).get_contract("contract-1")

    assert exc_info.value.status == 401
    assert len(recorder.requests) == 2
    assert http.tokens.access_token is None and http.tokens.refresh_token is None


@pytest.mark.asyncio
async def test_network_error_has_no_status():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    http, _ = http_client(handler)

    with pytest.raises(ApiError) as exc_info:
        await RealContractsClient(http).get_contract("contract-1")
    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_download_returns_binary_content():
    def handler(request):
        return httpx.Response(200, content=b"%PDF-1.4 data", headers={"content-type": "application/pdf"})

    http, _ = http_client(handler)
    document = await RealContractsClient(http).download_pdf("contract-1")

    assert document.content == b"%PDF-1.4 data"
    assert document.size == len(b"%PDF-1.4 data")


@pytest.mark.asyncio
async def test_respond_patches_status_and_message():
    def handler(request):
        return httpx.Response(200, json={
            "id": "application-1", "status": "approved_by_tenant", "applicantId": "applicant-1",
            "roommateSeekingPostId": "post-1",
        })

    http, recorder = http_client(handler)
    app = await RealRoommateApplicationsClient(http).respond(
        "application-1", RespondToApplicationRequest.decision(True, False, "Chào bạn")
    )

    assert app.applicant_id == "applicant-1"
    request = recorder.requests[0]
    assert (request.method, request.url.path) == ("PATCH", "/api/roommate-applications/application-1/respond")
    assert json.loads(request.content) == {"status": "approved_by_tenant", "responseMessage": "Chào bạn"}


@pytest.mark.asyncio
async def test_chat_send_and_list_unwrap_envelopes():
    def handler(request):
        if request.method == "POST":
            return httpx.Response(201, json={"data": {"id": "msg-1", "conversationId": "conv-1", "content": "hi"}})
        return httpx.Response(200, json={"data": [{"id": "msg-1", "conversationId": "conv-1", "content": "hi"}]})

    http, recorder = http_client(handler)
    chat = RealChatClient(http)

    sent = await chat.send_message(SendMessageRequest(content="hi", recipient_id="tenant-1"))
    messages = await chat.get_messages("conv-1", limit=20)

    assert sent.conversation_id == "conv-1"
    assert [m.id for m in messages] == ["msg-1"]
    assert json.loads(recorder.requests[0].content) == {"content": "hi", "type": "text", "recipientId": "tenant-1"}
    assert dict(recorder.requests[1].url.params) == {"limit": "20"}


@pytest.mark.asyncio
async def test_notification_filters_use_backend_names():
    def handler(request):
        if request.url.path.endswith("/count"):
            return httpx.Response(200, json={"data": {"count": 4}})
        return httpx.Response(200, json={"data": [], "page": 1, "limit": 20, "total": 0, "totalPages": 0})

    http, recorder = http_client(handler)
    notifications = RealNotificationsClient(http)

    await notifications.list_notifications({"is_read": False})
    assert await notifications.unread_count() == 4
    assert recorder.requests[0].url.params["isRead"] == "false"


def test_mode_selection(monkeypatch):
    monkeypatch.delenv("TRUSTAY_API_URL", raising=False)
    assert should_use_real_integrations(AppConfig(integrations=IntegrationsConfig(mode="real")))
    assert not should_use_real_integrations(AppConfig(integrations=IntegrationsConfig(mode="mock")))
    assert not should_use_real_integrations(AppConfig())

    monkeypatch.setenv("TRUSTAY_API_URL", BASE_URL)
    assert should_use_real_integrations(AppConfig())


def test_select_backend_builds_real_clients_sharing_tokens():
    config = AppConfig(api=BackendApiConfig(base_url=BASE_URL), integrations=IntegrationsConfig(mode="real"))

    clients = select_backend(config, access_token="a", refresh_token="r")

    assert isinstance(clients.contracts, RealContractsClient)
    assert clients.contracts.http is clients.chat.http
    assert clients.contracts.http.base_url == BASE_URL
    assert clients.contracts.http.tokens.refresh_token == "r"


def test_select_backend_mock_uses_token_as_user(backend):
    clients = select_backend(AppConfig(integrations=IntegrationsConfig(mode="mock")),
                             access_token="tenant-1", mock_backend=backend)

    assert isinstance(clients.contracts, MockContractsClient)
    assert clients.contracts.user_id == "tenant-1"
    assert clients.contracts.backend is backend
