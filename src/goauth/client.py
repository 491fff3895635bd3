"""Async client for the goauth authorization server.

``GoAuthClient`` wraps the OAuth 2.0 operations a relying party needs:

- authorization_code: redirect the user, then exchange the returned code
- refresh_token: renew a user's access token
- client_credentials: machine-to-machine tokens
- token introspection (RFC 7662) and revocation (RFC 7009)
- user info and user detail lookups
- optional offline JWT verification with shared secrets

Every network operation performs exactly one HTTP round trip. Backend
failures, whether reported through the HTTP status or through a business
code inside a 2xx envelope, are raised as ``APIError``.

Example:
    >>> client = GoAuthClient(
    ...     frontend_base_url="https://portal.example.com",
    ...     backend_base_url="https://auth.example.com",
    ...     client_id="my-client",
    ...     client_secret="secret",
    ...     redirect_uri="https://app.example.com/callback",
    ... )
    >>> url = client.build_authorization_url(state="xyz", scope="profile")
    >>> # ... user approves, browser lands on the callback with ?code=...
    >>> tokens = await client.exchange_token(code)
    >>> info = await client.user_info(tokens.access_token.access_token)
"""

from __future__ import annotations

from typing import Optional, TypeVar, Union

import httpx
from pydantic import BaseModel

from goauth import builders
from goauth.config import ClientConfig
from goauth.decoders import decode_envelope, decode_introspection
from goauth.errors import APIError, InvalidArgumentError, JWTNotConfiguredError
from goauth.models.tokens import (
    ClientCredentialsTokenResponse,
    IntrospectionResponse,
    TokenResponse,
)
from goauth.models.users import UserDetail, UserInfo
from goauth.normalizer import decode_api_error
from goauth.observability import bound_context, get_logger
from goauth.transport import PreparedRequest, RawResponse, send_request
from goauth.utils.sanitization import sanitize_token
from goauth.verifier import JWTVerifier, TokenClaims

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _require(value: Optional[str], argument: str) -> None:
    if not value:
        raise InvalidArgumentError(argument)


class GoAuthClient:
    """Client for a goauth authorization server.

    Holds only immutable configuration, so one instance can be shared by
    any number of concurrent tasks.
    """

    def __init__(
        self,
        frontend_base_url: str,
        backend_base_url: str,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        access_token_secret: Optional[str] = None,
        refresh_token_secret: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the client.

        Args:
            frontend_base_url: Portal base URL hosting the consent page.
            backend_base_url: goauth API base URL.
            client_id: OAuth client ID.
            client_secret: OAuth client secret.
            redirect_uri: Registered callback URL.
            transport: Optional httpx transport (e.g. MockTransport for testing).
            access_token_secret: Enables ``parse_access_token``/``validate_token``.
            refresh_token_secret: Enables ``parse_refresh_token``.
            timeout: Optional per-request timeout in seconds.

        Raises:
            ConfigurationError: A required setting is empty or a base URL is malformed.
        """
        config = ClientConfig.create(
            frontend_base_url=frontend_base_url,
            backend_base_url=backend_base_url,
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            transport=transport,
            access_token_secret=access_token_secret,
            refresh_token_secret=refresh_token_secret,
            timeout=timeout,
        )
        self._init_from_config(config)

    @classmethod
    def from_config(cls, config: ClientConfig) -> GoAuthClient:
        """Create a client from an already validated ``ClientConfig``."""
        client = cls.__new__(cls)
        client._init_from_config(config)
        return client

    def _init_from_config(self, config: ClientConfig) -> None:
        self._config = config
        self._jwt_verifier: Optional[JWTVerifier] = None
        if config.offline_verification_enabled:
            self._jwt_verifier = JWTVerifier(
                access_token_secret=config.access_token_secret,
                refresh_token_secret=config.refresh_token_secret,
            )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def jwt_verifier(self) -> Optional[JWTVerifier]:
        """The offline verifier, or None when no token secret was configured."""
        return self._jwt_verifier

    # Authorization redirect

    def build_authorization_url(
        self, state: Optional[str] = None, scope: Optional[str] = None
    ) -> str:
        """Return the consent-page URL to redirect the user's browser to.

        Args:
            state: Optional CSRF state; omitted from the URL when empty.
            scope: Optional space-separated scopes; omitted from the URL when empty.
        """
        return builders.build_authorization_url(self._config, state=state, scope=scope)

    # Token endpoint

    async def exchange_token(self, code: str) -> TokenResponse:
        """Exchange an authorization code for access and refresh tokens.

        Raises:
            InvalidArgumentError: code is empty.
            TransportError: The request could not be sent.
            ResponseDecodeError: The 2xx body was not a token envelope.
            APIError: The server rejected the code.
        """
        _require(code, "code")
        response = await self._send(
            "exchange_token", builders.build_authorization_code_request(self._config, code)
        )
        token = self._decode(response, TokenResponse)
        logger.info(
            "goauth.oauth.token_issued",
            grant_type=builders.GRANT_AUTHORIZATION_CODE,
            expires_in=token.access_token.expires_in,
            scope=token.scope,
        )
        return token

    async def refresh_token(self, refresh_token: str) -> TokenResponse:
        """Obtain a new token pair using a refresh token.

        Raises:
            InvalidArgumentError: refresh_token is empty.
            TransportError: The request could not be sent.
            ResponseDecodeError: The 2xx body was not a token envelope.
            APIError: The server rejected the refresh token.
        """
        _require(refresh_token, "refresh_token")
        response = await self._send(
            "refresh_token",
            builders.build_refresh_token_request(self._config, refresh_token),
        )
        token = self._decode(response, TokenResponse)
        logger.info(
            "goauth.oauth.token_issued",
            grant_type=builders.GRANT_REFRESH_TOKEN,
            expires_in=token.access_token.expires_in,
            scope=token.scope,
        )
        return token

    async def client_credentials_token(
        self, scope: Optional[str] = None
    ) -> ClientCredentialsTokenResponse:
        """Obtain an access token for the client itself (client_credentials grant).

        Args:
            scope: Optional space-separated scopes; not sent when empty.
        """
        response = await self._send(
            "client_credentials_token",
            builders.build_client_credentials_request(self._config, scope),
        )
        token = self._decode(response, ClientCredentialsTokenResponse)
        logger.info(
            "goauth.oauth.token_issued",
            grant_type=builders.GRANT_CLIENT_CREDENTIALS,
            expires_in=token.expires_in,
            scope=token.scope,
        )
        return token

    # Introspection and revocation

    async def introspect_token(
        self, token: str, token_type_hint: Optional[str] = None
    ) -> IntrospectionResponse:
        """Query the server for a token's state and metadata (RFC 7662).

        An inactive token is a normal result (``active=False``), not an error.

        Args:
            token: Access or refresh token.
            token_type_hint: Optional "access_token" or "refresh_token".
        """
        _require(token, "token")
        response = await self._send(
            "introspect_token",
            builders.build_introspect_request(self._config, token, token_type_hint),
        )
        if not response.is_success:
            raise self._api_error(response, "introspect")
        result = decode_introspection(response)
        logger.debug(
            "goauth.oauth.token_introspected",
            token=sanitize_token(token),
            active=result.active,
        )
        return result

    async def revoke_token(self, token: str, token_type_hint: Optional[str] = None) -> None:
        """Revoke a token (RFC 7009).

        Any HTTP 200 is success, whether or not the token existed, so revoking
        twice is harmless. Any other status raises ``APIError``.
        """
        _require(token, "token")
        response = await self._send(
            "revoke_token",
            builders.build_revoke_request(self._config, token, token_type_hint),
        )
        if response.status_code != 200:
            raise self._api_error(response, "revoke")
        logger.info(
            "goauth.oauth.token_revoked",
            token=sanitize_token(token),
            token_type_hint=token_type_hint,
        )

    # User endpoints

    async def user_info(self, access_token: str) -> UserInfo:
        """Return the profile of the user owning ``access_token``.

        Raises:
            InvalidArgumentError: access_token is empty.
            APIError: e.g. 401 for an expired token, 403 for missing scope.
        """
        _require(access_token, "access_token")
        response = await self._send(
            "user_info", builders.build_userinfo_request(self._config, access_token)
        )
        return self._decode(response, UserInfo)

    async def get_user(self, access_token: str, user_id: Union[int, str]) -> UserDetail:
        """Look up a user by primary key (``GET /api/v1/users/{id}``).

        Typically called with a client_credentials token carrying the
        ``profile`` scope.
        """
        _require(access_token, "access_token")
        if user_id is None or user_id == "" or user_id == 0:
            raise InvalidArgumentError("user_id")
        response = await self._send(
            "get_user",
            builders.build_get_user_request(self._config, access_token, user_id),
        )
        return self._decode(response, UserDetail)

    async def get_user_by_subject(self, access_token: str, subject: str) -> UserDetail:
        """Look up a user by public subject (``GET /api/v1/users/sub/{sub}``)."""
        _require(access_token, "access_token")
        _require(subject, "subject")
        response = await self._send(
            "get_user_by_subject",
            builders.build_get_user_by_subject_request(self._config, access_token, subject),
        )
        return self._decode(response, UserDetail)

    # Offline verification

    def _access_verifier(self) -> JWTVerifier:
        if self._jwt_verifier is None or not self._jwt_verifier.has_access_secret:
            raise JWTNotConfiguredError("access_token_secret")
        return self._jwt_verifier

    def _refresh_verifier(self) -> JWTVerifier:
        if self._jwt_verifier is None or not self._jwt_verifier.has_refresh_secret:
            raise JWTNotConfiguredError("refresh_token_secret")
        return self._jwt_verifier

    def parse_access_token(self, token: str) -> TokenClaims:
        """Verify an access token locally and return its claims.

        Raises:
            InvalidArgumentError: token is empty.
            JWTNotConfiguredError: No access token secret was configured.
            TokenVerificationError: The token is invalid or expired.
        """
        _require(token, "token")
        return self._access_verifier().parse_access_token(token)

    def parse_refresh_token(self, token: str) -> TokenClaims:
        """Verify a refresh token locally and return its claims.

        Raises:
            InvalidArgumentError: token is empty.
            JWTNotConfiguredError: No refresh token secret was configured.
            TokenVerificationError: The token is invalid or expired.
        """
        _require(token, "token")
        return self._refresh_verifier().parse_refresh_token(token)

    def validate_token(self, token: str) -> None:
        """Verify an access token locally; raise if it is not valid."""
        _require(token, "token")
        self._access_verifier().validate_token(token)

    # Plumbing

    async def _send(self, operation: str, prepared: PreparedRequest) -> RawResponse:
        with bound_context(operation=operation):
            return await send_request(
                prepared,
                transport=self._config.transport,
                timeout=self._config.timeout,
            )

    def _api_error(self, response: RawResponse, operation: str) -> APIError:
        error = decode_api_error(response.status_code, response.body)
        logger.warning(
            "goauth.oauth.api_error",
            operation=operation,
            status=error.status,
            code=error.code,
            detail=error.detail,
        )
        return error

    def _decode(self, response: RawResponse, model: type[ModelT]) -> ModelT:
        if not response.is_success:
            raise self._api_error(response, model.__name__)
        try:
            return decode_envelope(response, model)
        except APIError as exc:
            logger.warning(
                "goauth.oauth.business_error",
                operation=model.__name__,
                status=exc.status,
                code=exc.code,
                detail=exc.detail,
            )
            raise
