from collections.abc import Iterator
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from stage_webhook.core.activecampaign_client import ActiveCampaignClient
from stage_webhook.core.settings import settings
from stage_webhook.main import app
from stage_webhook.models.update_result import UpdateResult

AC_API_URL = "https://account.api-us1.com/api/3"
MAPPING = {"greece-work-visa": "MQL"}


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """Клиент приложения с заданной конфигурацией и тестовой таблицей."""
    monkeypatch.setattr(settings, "AC_API_URL", AC_API_URL)
    monkeypatch.setattr(settings, "AC_API_KEY", "secret-key")
    with patch("stage_webhook.services.stage_service.LANDING_PAGES", MAPPING):
        yield TestClient(app)


@pytest.fixture
def update_mock() -> Iterator[AsyncMock]:
    """Подмена обновления поля в ActiveCampaign."""
    mock = AsyncMock(return_value=UpdateResult(success=True, status_code=200, data={"contact": {"id": "42"}}))
    with patch.object(ActiveCampaignClient, "update_contact_field", mock):
        yield mock


class TestWebhookMethods:
    """Тесты обработки HTTP-методов."""

    def test_options_preflight(self, client: TestClient) -> None:
        """Тест CORS preflight."""
        response = client.options("/api/webhook")
        assert response.status_code == 200
        assert response.content == b""

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "TRACE", "PROPFIND"])
    def test_method_not_allowed(self, client: TestClient, method: str) -> None:
        """Тест неподдерживаемых методов."""
        response = client.request(method, "/api/webhook")
        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}


class TestWebhookConfiguration:
    """Тесты проверки конфигурации."""

    @pytest.mark.parametrize("missing", ["AC_API_URL", "AC_API_KEY"])
    def test_missing_configuration(
        self, client: TestClient, update_mock: AsyncMock, monkeypatch: pytest.MonkeyPatch, missing: str
    ) -> None:
        """Тест отсутствующих переменных окружения."""
        monkeypatch.setattr(settings, missing, None)

        with patch("stage_webhook.services.stage_service.extract_contact_id") as extract_mock:
            response = client.post("/api/webhook", data={"contact[id]": "42"})

        assert response.status_code == 500
        assert response.json() == {"error": "Server configuration error"}
        extract_mock.assert_not_called()
        update_mock.assert_not_called()


class TestWebhookFlow:
    """Тесты обработки вебхука."""

    def test_webhook_updates_stage(self, client: TestClient, update_mock: AsyncMock) -> None:
        """Тест полного сценария с form-данными ActiveCampaign."""
        response = client.post(
            "/api/webhook",
            data={
                "contact[id]": "42",
                "contact[fields][232]": "https://www.example.com/greece-work-visa/",
            },
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Contact field updated successfully",
            "contactId": "42",
            "landingPage": "https://www.example.com/greece-work-visa/",
            "slug": "greece-work-visa",
            "stage": "MQL",
        }
        update_mock.assert_awaited_once_with("42", "272", "MQL")

    def test_webhook_json_payload(self, client: TestClient, update_mock: AsyncMock) -> None:
        """Тест вложенного JSON."""
        response = client.post(
            "/api/webhook",
            json={"contact": {"id": 42, "fields": {"LANDING_PAGE": "https://www.example.com/greece-work-visa"}}},
        )

        assert response.status_code == 200
        assert response.json()["stage"] == "MQL"
        update_mock.assert_awaited_once_with(42, "272", "MQL")

    def test_webhook_missing_contact_id(self, client: TestClient, update_mock: AsyncMock) -> None:
        """Тест без ID контакта."""
        payload = {"contact[fields][232]": "https://www.example.com/greece-work-visa/"}

        response = client.post("/api/webhook", data=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "No contact ID provided", "received": payload}
        update_mock.assert_not_called()

    @pytest.mark.parametrize(
        ("content", "content_type"),
        [
            (b"{not json", "application/json"),
            (b"garbage", "multipart/form-data; boundary=xx"),
        ],
    )
    def test_webhook_unparseable_body(
        self, client: TestClient, update_mock: AsyncMock, content: bytes, content_type: str
    ) -> None:
        """Тест тела, которое не удаётся разобрать - считается пустым."""
        response = client.post("/api/webhook", content=content, headers={"content-type": content_type})

        assert response.status_code == 400
        assert response.json() == {"error": "No contact ID provided", "received": {}}
        update_mock.assert_not_called()

    def test_webhook_missing_landing_page(self, client: TestClient, update_mock: AsyncMock) -> None:
        """Тест без посадочной страницы."""
        response = client.post("/api/webhook", data={"contact[id]": "42", "contact[email]": "a@b.com"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "No landing page to process",
            "contactId": "42",
        }
        update_mock.assert_not_called()

    def test_webhook_unmapped_landing_page(self, client: TestClient, update_mock: AsyncMock) -> None:
        """Тест страницы, которой нет в таблице."""
        response = client.post(
            "/api/webhook",
            data={"contact[id]": "42", "landing_page": "https://www.example.com/unknown/"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Landing page not in mapping",
            "contactId": "42",
            "landingPage": "https://www.example.com/unknown/",
        }
        update_mock.assert_not_called()

    def test_webhook_upstream_failure(self, client: TestClient) -> None:
        """Тест ошибки 500 от ActiveCampaign - один запрос, ответ 500."""
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500, json={"message": "upstream down"})

        def make_client(base_url: str, api_key: str) -> ActiveCampaignClient:
            return ActiveCampaignClient(base_url, api_key, transport=httpx.MockTransport(handler))

        with patch("stage_webhook.services.stage_service.ActiveCampaignClient", side_effect=make_client):
            response = client.post(
                "/api/webhook",
                data={"contact[id]": "42", "contact[fields][232]": "https://www.example.com/greece-work-visa/"},
            )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to update contact field"
        assert "500" in body["message"]
        assert body["details"] == {"message": "upstream down"}
        assert len(calls) == 1
        assert str(calls[0].url) == f"{AC_API_URL}/contacts/42"

    def test_webhook_unexpected_error(self, client: TestClient) -> None:
        """Тест непредвиденной ошибки."""
        with patch("stage_webhook.services.stage_service.resolve_stage", side_effect=RuntimeError("boom")):
            response = client.post(
                "/api/webhook",
                data={"contact[id]": "42", "landing_page": "https://www.example.com/greece-work-visa/"},
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error", "message": "boom"}


class TestHealth:
    """Тесты health-check."""

    def test_health(self, client: TestClient) -> None:
        """Тест статуса приложения."""
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["version"] == settings.APP_VERSION
        assert body["message"] == "AC Landing Page Stage Webhook is running"
        assert "timestamp" in body
