"""Keystone authentication for the OpenStack backend.

keystoneauth1 owns the token lifecycle (initial authentication, refresh
before expiry, service catalog lookup). KeystoneTokenAuth plugs the current
token into httpx requests and, when re-authentication is allowed, replays a
request once after the service rejects a token with 401.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Protocol

import httpx
from keystoneauth1 import exceptions as ks_exceptions
from keystoneauth1 import session as ks_session
from keystoneauth1.identity import generic

from swiftstore.storage.errors import InvalidConfigError, PermissionDeniedError
from swiftstore.storage.openstack.options import SwiftOptions

logger = logging.getLogger(__name__)

AUTH_TOKEN_HEADER = "X-Auth-Token"
OBJECT_STORE_SERVICE_TYPE = "object-store"

_OP = "storage.openstack.new"


class TokenSource(Protocol):
    """The subset of keystoneauth1.session.Session used for token handling."""

    def get_token(self) -> str | None: ...

    def invalidate(self) -> bool: ...


class KeystoneTokenAuth(httpx.Auth):
    """httpx auth flow that sends a Keystone token in X-Auth-Token."""

    def __init__(self, tokens: TokenSource, *, allow_reauth: bool = True) -> None:
        self._tokens = tokens
        self._allow_reauth = allow_reauth

    def _token(self) -> str:
        token = self._tokens.get_token()
        if not token:
            raise ks_exceptions.AuthorizationFailure("no token available")
        return token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers[AUTH_TOKEN_HEADER] = self._token()
        response = yield request

        if response.status_code != 401 or not self._allow_reauth:
            return

        logger.info("Token rejected by object storage, re-authenticating")
        if not self._tokens.invalidate():
            return
        request.headers[AUTH_TOKEN_HEADER] = self._token()
        yield request


def create_session(options: SwiftOptions) -> ks_session.Session:
    """Build a Keystone session for the configured user and project."""
    plugin = generic.Password(
        auth_url=options.auth_url,
        username=options.username,
        password=options.password,
        project_name=options.tenant_name,
        user_domain_name=options.user_domain_name,
        project_domain_name=options.project_domain_name,
    )
    return ks_session.Session(auth=plugin)


def authenticate(session: ks_session.Session, options: SwiftOptions) -> str:
    """Authenticate and resolve the object-store endpoint for the region.

    Returns:
        Public object-store endpoint URL for the configured region.

    Raises:
        PermissionDeniedError: If authentication fails.
        InvalidConfigError: If no object-store endpoint exists for the region.
    """
    try:
        session.get_token()
    except ks_exceptions.ClientException as e:
        raise PermissionDeniedError(f"could not authenticate: {e}", op=_OP, cause=e) from e
    logger.info("Authenticated against %s", options.auth_url)

    try:
        endpoint = session.get_endpoint(
            service_type=OBJECT_STORE_SERVICE_TYPE,
            interface="public",
            region_name=options.region,
        )
    except ks_exceptions.ClientException as e:
        raise InvalidConfigError(
            f"could not create object storage client: {e}", op=_OP, cause=e
        ) from e

    if not endpoint:
        raise InvalidConfigError(
            f"could not create object storage client: no {OBJECT_STORE_SERVICE_TYPE} "
            f"endpoint in region {options.region!r}",
            op=_OP,
        )
    return str(endpoint)
