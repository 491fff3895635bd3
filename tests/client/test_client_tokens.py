"""Tests for GoAuthClient token grants against a mocked backend."""

import io

import httpx
import pytest

from goauth.client import GoAuthClient
from goauth.config import ClientConfig
from goauth.errors import APIError, InvalidArgumentError, ResponseDecodeError, TransportError
from goauth.models import ClientCredentialsTokenResponse, TokenResponse
from goauth.observability import REDACTED_PLACEHOLDER
from tests.factories import (
    REDIRECT_URI,
    RecordingHandler,
    create_client,
    create_config,
    envelope,
    json_response,
    log_events,
    token_data,
)


class TestExchangeToken:
    async def test_returns_tokens_on_success(self) -> None:
        handler = RecordingHandler.json(envelope(token_data(access="t"), message="ok"))
        client = create_client(handler)

        token = await client.exchange_token("auth-code")

        assert isinstance(token, TokenResponse)
        assert token.access_token.access_token == "t"
        assert token.access_token.expires_in == 3600
        assert token.refresh_token.refresh_token == "refresh-token"
        assert token.scope == "profile"

        request = handler.last
        assert request.method == "POST"
        assert request.url.path == "/api/v1/oauth/token"
        assert request.headers["Authorization"].startswith("Basic ")
        assert handler.last_form() == {
            "grant_type": ["authorization_code"],
            "code": ["auth-code"],
            "redirect_uri": [REDIRECT_URI],
        }

    async def test_business_error_on_http_200(self) -> None:
        client = create_client(json_response({"code": 1001, "message": "expired code"}))

        with pytest.raises(APIError) as exc_info:
            await client.exchange_token("stale-code")

        error = exc_info.value
        assert error.status == 200
        assert error.code == "1001"
        assert error.detail == "expired code"

    async def test_business_error_with_empty_data_object(self) -> None:
        client = create_client(
            json_response({"code": 1001, "message": "expired code", "data": {}})
        )

        with pytest.raises(APIError) as exc_info:
            await client.exchange_token("stale-code")

        assert exc_info.value.code == "1001"

    async def test_http_error_normalized(self) -> None:
        body = {"type": "about:blank", "title": "INVALID_CLIENT", "status": 401, "detail": "bad"}
        client = create_client(json_response(body, status_code=401))

        with pytest.raises(APIError) as exc_info:
            await client.exchange_token("code")

        assert exc_info.value.status == 401
        assert exc_info.value.code == "INVALID_CLIENT"

    async def test_legacy_numeric_error_on_http_400(self) -> None:
        client = create_client(
            json_response({"code": 1002, "message": "redirect_uri mismatch"}, status_code=400)
        )

        with pytest.raises(APIError) as exc_info:
            await client.exchange_token("code")

        assert exc_info.value.status == 400
        assert exc_info.value.code == "1002"

    async def test_empty_code_rejected_without_request(self) -> None:
        handler = RecordingHandler.json(envelope(token_data()))
        client = create_client(handler)

        with pytest.raises(InvalidArgumentError):
            await client.exchange_token("")

        assert handler.requests == []

    async def test_non_json_success_is_decode_error(self) -> None:
        handler = RecordingHandler(httpx.Response(200, content=b"<html>gateway</html>"))
        client = create_client(handler)

        with pytest.raises(ResponseDecodeError) as exc_info:
            await client.exchange_token("code")

        assert "gateway" in exc_info.value.body_preview

    async def test_network_error_is_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused")

        client = create_client(handler)

        with pytest.raises(TransportError) as exc_info:
            await client.exchange_token("code")

        assert isinstance(exc_info.value.cause, httpx.ConnectError)


class TestRefreshToken:
    async def test_returns_new_tokens(self) -> None:
        handler = RecordingHandler.json(envelope(token_data(access="new", refresh="r2")))
        client = create_client(handler)

        token = await client.refresh_token("r1")

        assert token.access_token.access_token == "new"
        assert token.refresh_token.refresh_token == "r2"
        assert handler.last_form() == {
            "grant_type": ["refresh_token"],
            "refresh_token": ["r1"],
        }

    async def test_empty_refresh_token_rejected(self) -> None:
        client = create_client(json_response(envelope(token_data())))

        with pytest.raises(InvalidArgumentError) as exc_info:
            await client.refresh_token("")

        assert exc_info.value.argument == "refresh_token"

    async def test_revoked_refresh_token(self) -> None:
        client = create_client(json_response({"code": 1003, "message": "refresh token revoked"}))

        with pytest.raises(APIError) as exc_info:
            await client.refresh_token("r1")

        assert exc_info.value.code == "1003"


class TestClientCredentials:
    async def test_returns_access_token_only(self) -> None:
        data = {"access_token": "cc", "expires_in": 7200, "token_type": "Bearer", "scope": "api"}
        handler = RecordingHandler.json(envelope(data))
        client = create_client(handler)

        token = await client.client_credentials_token("api")

        assert isinstance(token, ClientCredentialsTokenResponse)
        assert token.access_token == "cc"
        assert token.expires_in == 7200
        assert not hasattr(token, "refresh_token")
        assert handler.last_form() == {"grant_type": ["client_credentials"], "scope": ["api"]}

    async def test_empty_scope_not_sent(self) -> None:
        data = {"access_token": "cc", "expires_in": 7200, "token_type": "Bearer", "scope": ""}
        handler = RecordingHandler.json(envelope(data))
        client = create_client(handler)

        await client.client_credentials_token("")

        assert handler.last_form() == {"grant_type": ["client_credentials"]}
        assert b"scope" not in handler.last.content


class TestBuildAuthorizationURL:
    def test_omits_empty_state_and_scope(self) -> None:
        client = create_client()

        url = client.build_authorization_url(state="", scope="")

        query = httpx.URL(url).params
        assert "scope" not in query
        assert "state" not in query
        assert query["response_type"] == "code"

    def test_includes_state_and_scope(self) -> None:
        client = create_client()

        url = client.build_authorization_url(state="s1", scope="profile")

        params = httpx.URL(url).params
        assert params["state"] == "s1"
        assert params["scope"] == "profile"


class TestConstruction:
    def test_from_config(self) -> None:
        config: ClientConfig = create_config()

        client = GoAuthClient.from_config(config)

        assert client.config is config
        assert client.jwt_verifier is None

    def test_timeout_passed_through(self) -> None:
        client = create_client(timeout=5.0)

        assert client.config.timeout == 5.0


class TestLogging:
    async def test_request_events_carry_operation(self, json_log_stream: io.StringIO) -> None:
        client = create_client(json_response(envelope(token_data())))

        await client.exchange_token("auth-code")

        (record,) = log_events(json_log_stream, "goauth.http.response")
        assert record["operation"] == "exchange_token"
        assert record["form"]["code"] == REDACTED_PLACEHOLDER
        assert "auth-code" not in json_log_stream.getvalue()
