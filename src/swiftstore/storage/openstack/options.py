"""OpenStack backend option parsing.

Option names are shared with the generic dial interface. Names prefixed with
``private`` hold credentials and must never be logged.
"""

from __future__ import annotations

from dataclasses import dataclass

from swiftstore.storage.errors import InvalidConfigError
from swiftstore.storage.registry import Opts

OPENSTACK_REGION = "openstackRegion"
OPENSTACK_CONTAINER = "openstackContainer"
OPENSTACK_AUTH_URL = "openstackAuthURL"
OPENSTACK_TENANT_NAME = "privateOpenstackTenantName"
OPENSTACK_USERNAME = "privateOpenstackUsername"
OPENSTACK_PASSWORD = "privateOpenstackPassword"

OPENSTACK_USER_DOMAIN_NAME = "openstackUserDomainName"
OPENSTACK_PROJECT_DOMAIN_NAME = "openstackProjectDomainName"
OPENSTACK_ALLOW_REAUTH = "openstackAllowReauth"

REQUIRED_OPTIONS = (
    OPENSTACK_REGION,
    OPENSTACK_CONTAINER,
    OPENSTACK_AUTH_URL,
    OPENSTACK_TENANT_NAME,
    OPENSTACK_USERNAME,
    OPENSTACK_PASSWORD,
)

_OP = "storage.openstack.new"


def _parse_bool(key: str, raw: str | None, default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    val = raw.strip().lower()
    if val in ("1", "true", "yes"):
        return True
    if val in ("0", "false", "no"):
        return False
    raise InvalidConfigError(f"{key!r} must be a boolean, got {raw!r}", op=_OP)


@dataclass(frozen=True)
class SwiftOptions:
    """Validated configuration of the OpenStack backend."""

    region: str
    container: str
    auth_url: str
    tenant_name: str
    username: str
    password: str
    user_domain_name: str | None = None
    project_domain_name: str | None = None
    allow_reauth: bool = True

    def __repr__(self) -> str:
        return (
            f"SwiftOptions(region={self.region!r}, container={self.container!r}, "
            f"auth_url={self.auth_url!r}, allow_reauth={self.allow_reauth!r})"
        )

    @classmethod
    def from_opts(cls, opts: Opts) -> SwiftOptions:
        """Validate dial options.

        Raises:
            InvalidConfigError: If a required option is missing or a value is malformed.
        """
        for key in REQUIRED_OPTIONS:
            if key not in opts:
                raise InvalidConfigError(f"{key!r} option is required", op=_OP)

        container = opts.opts[OPENSTACK_CONTAINER]
        if not container or "/" in container:
            raise InvalidConfigError(
                f"{OPENSTACK_CONTAINER!r} must be a non-empty name without '/'",
                op=_OP,
                container=container,
            )

        return cls(
            region=opts.opts[OPENSTACK_REGION],
            container=container,
            auth_url=opts.opts[OPENSTACK_AUTH_URL],
            tenant_name=opts.opts[OPENSTACK_TENANT_NAME],
            username=opts.opts[OPENSTACK_USERNAME],
            password=opts.opts[OPENSTACK_PASSWORD],
            user_domain_name=opts.get(OPENSTACK_USER_DOMAIN_NAME) or None,
            project_domain_name=opts.get(OPENSTACK_PROJECT_DOMAIN_NAME) or None,
            allow_reauth=_parse_bool(
                OPENSTACK_ALLOW_REAUTH, opts.get(OPENSTACK_ALLOW_REAUTH), default=True
            ),
        )
