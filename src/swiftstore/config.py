"""Environment configuration for swiftstore.

Reads the variables exported by an OpenStack ``openrc`` file and turns them
into dial options for the OpenStack backend.

Environment Variables:
    OS_AUTH_URL: Keystone identity endpoint
    OS_USERNAME: User name
    OS_PASSWORD: Password
    OS_PROJECT_NAME: Project name (falls back to OS_TENANT_NAME)
    OS_REGION_NAME: Region of the object-store endpoint
    OS_USER_DOMAIN_NAME: Keystone v3 user domain (optional)
    OS_PROJECT_DOMAIN_NAME: Keystone v3 project domain (optional)
    SWIFTSTORE_CONTAINER: Container holding the blobs
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from swiftstore.storage.openstack.options import (
    OPENSTACK_AUTH_URL,
    OPENSTACK_CONTAINER,
    OPENSTACK_PASSWORD,
    OPENSTACK_PROJECT_DOMAIN_NAME,
    OPENSTACK_REGION,
    OPENSTACK_TENANT_NAME,
    OPENSTACK_USER_DOMAIN_NAME,
    OPENSTACK_USERNAME,
)
from swiftstore.storage.registry import DialOpt, with_key_value

SWIFTSTORE_CONTAINER_ENV = "SWIFTSTORE_CONTAINER"

# Option name -> environment variables, first non-empty wins.
_ENV_SOURCES: dict[str, tuple[str, ...]] = {
    OPENSTACK_AUTH_URL: ("OS_AUTH_URL",),
    OPENSTACK_USERNAME: ("OS_USERNAME",),
    OPENSTACK_PASSWORD: ("OS_PASSWORD",),
    OPENSTACK_TENANT_NAME: ("OS_PROJECT_NAME", "OS_TENANT_NAME"),
    OPENSTACK_REGION: ("OS_REGION_NAME",),
    OPENSTACK_USER_DOMAIN_NAME: ("OS_USER_DOMAIN_NAME",),
    OPENSTACK_PROJECT_DOMAIN_NAME: ("OS_PROJECT_DOMAIN_NAME",),
    OPENSTACK_CONTAINER: (SWIFTSTORE_CONTAINER_ENV,),
}


def options_from_env(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Collect OpenStack backend options from environment variables.

    Unset or empty variables are left out so the backend can report
    exactly which required option is missing.
    """
    env = os.environ if environ is None else environ
    options: dict[str, str] = {}
    for option, variables in _ENV_SOURCES.items():
        for var in variables:
            value = env.get(var, "").strip()
            if value:
                options[option] = value
                break
    return options


def dial_opts_from_env(environ: Mapping[str, str] | None = None) -> list[DialOpt]:
    """Return dial options built from environment variables."""
    return [with_key_value(k, v) for k, v in sorted(options_from_env(environ).items())]
