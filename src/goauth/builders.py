"""Request builders for goauth OAuth operations.

Each builder is a pure function of the client configuration and the call
arguments; nothing here touches the network. All token-issuing grants POST
a form to the single token endpoint under HTTP Basic client authentication
and differ only in their parameters. Optional parameters are left out of
the form entirely rather than sent as empty strings.
"""

from __future__ import annotations

import base64
from typing import Optional, Union
from urllib.parse import quote

import httpx
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri

from goauth.config import ClientConfig
from goauth.errors import ConfigurationError
from goauth.transport import PreparedRequest

AUTHORIZE_PATH = "/oauth/authorize"
TOKEN_PATH = "/api/v1/oauth/token"
INTROSPECT_PATH = "/api/v1/oauth/introspect"
REVOKE_PATH = "/api/v1/oauth/revoke"
USERINFO_PATH = "/api/v1/oauth/userinfo"
USERS_PATH = "/api/v1/users"

GRANT_AUTHORIZATION_CODE = "authorization_code"
GRANT_REFRESH_TOKEN = "refresh_token"
GRANT_CLIENT_CREDENTIALS = "client_credentials"

TOKEN_TYPE_HINT_ACCESS = "access_token"
TOKEN_TYPE_HINT_REFRESH = "refresh_token"

_JSON_ACCEPT = {"Accept": "application/json"}


def basic_auth_header(client_id: str, client_secret: str) -> str:
    """Return the ``Authorization`` value for HTTP Basic client authentication."""
    credentials = f"{client_id}:{client_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


def bearer_auth_header(access_token: str) -> str:
    return f"Bearer {access_token}"


def _client_auth_post(config: ClientConfig, path: str, form: dict[str, str]) -> PreparedRequest:
    return PreparedRequest(
        method="POST",
        url=config.backend_base_url + path,
        headers={
            **_JSON_ACCEPT,
            "Authorization": basic_auth_header(config.client_id, config.client_secret),
        },
        form=form,
    )


def _bearer_get(config: ClientConfig, path: str, access_token: str) -> PreparedRequest:
    return PreparedRequest(
        method="GET",
        url=config.backend_base_url + path,
        headers={**_JSON_ACCEPT, "Authorization": bearer_auth_header(access_token)},
    )


def build_authorization_url(
    config: ClientConfig,
    state: Optional[str] = None,
    scope: Optional[str] = None,
) -> str:
    """Build the consent-page URL the user's browser should be redirected to.

    The frontend shows the consent page and, once the user approves, sends
    the browser on to ``redirect_uri`` with an authorization code.

    Args:
        config: Client configuration.
        state: Opaque CSRF state echoed back on the redirect; omitted when empty.
        scope: Space-separated scopes; omitted when empty.

    Returns:
        Absolute URL of the form
        ``{frontend}/oauth/authorize?response_type=code&client_id=...&redirect_uri=...``.

    Raises:
        ConfigurationError: The frontend base URL cannot be parsed.
    """
    base = config.frontend_base_url + AUTHORIZE_PATH
    try:
        httpx.URL(base)
    except httpx.InvalidURL as exc:
        raise ConfigurationError(
            f"malformed frontend base URL: {exc}", field="frontend_base_url"
        ) from exc

    return prepare_grant_uri(
        base,
        client_id=config.client_id,
        response_type="code",
        redirect_uri=config.redirect_uri,
        scope=scope or None,
        state=state or None,
    )


def build_authorization_code_request(config: ClientConfig, code: str) -> PreparedRequest:
    return _client_auth_post(
        config,
        TOKEN_PATH,
        {
            "grant_type": GRANT_AUTHORIZATION_CODE,
            "code": code,
            "redirect_uri": config.redirect_uri,
        },
    )


def build_refresh_token_request(config: ClientConfig, refresh_token: str) -> PreparedRequest:
    return _client_auth_post(
        config,
        TOKEN_PATH,
        {"grant_type": GRANT_REFRESH_TOKEN, "refresh_token": refresh_token},
    )


def build_client_credentials_request(
    config: ClientConfig, scope: Optional[str] = None
) -> PreparedRequest:
    """Build the client_credentials token request.

    ``scope`` is only sent when non-empty; the server treats an explicit
    empty scope differently from an absent one.
    """
    form = {"grant_type": GRANT_CLIENT_CREDENTIALS}
    if scope:
        form["scope"] = scope
    return _client_auth_post(config, TOKEN_PATH, form)


def _token_form(token: str, token_type_hint: Optional[str]) -> dict[str, str]:
    form = {"token": token}
    if token_type_hint:
        form["token_type_hint"] = token_type_hint
    return form


def build_introspect_request(
    config: ClientConfig, token: str, token_type_hint: Optional[str] = None
) -> PreparedRequest:
    """Build an RFC 7662 introspection request."""
    return _client_auth_post(config, INTROSPECT_PATH, _token_form(token, token_type_hint))


def build_revoke_request(
    config: ClientConfig, token: str, token_type_hint: Optional[str] = None
) -> PreparedRequest:
    """Build an RFC 7009 revocation request."""
    return _client_auth_post(config, REVOKE_PATH, _token_form(token, token_type_hint))


def build_userinfo_request(config: ClientConfig, access_token: str) -> PreparedRequest:
    return _bearer_get(config, USERINFO_PATH, access_token)


def build_get_user_request(
    config: ClientConfig, access_token: str, user_id: Union[int, str]
) -> PreparedRequest:
    """Build ``GET /api/v1/users/{id}``; the id is escaped as a single path segment."""
    return _bearer_get(config, f"{USERS_PATH}/{quote(str(user_id), safe='')}", access_token)


def build_get_user_by_subject_request(
    config: ClientConfig, access_token: str, subject: str
) -> PreparedRequest:
    """Build ``GET /api/v1/users/sub/{sub}``; the subject is escaped as a single path segment."""
    return _bearer_get(config, f"{USERS_PATH}/sub/{quote(subject, safe='')}", access_token)
