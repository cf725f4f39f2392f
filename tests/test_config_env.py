"""Tests for reading backend options from OpenStack environment variables."""

from __future__ import annotations

import pytest

from swiftstore.config import dial_opts_from_env, options_from_env

OPENRC = {
    "OS_AUTH_URL": "https://auth.example.net/v3",
    "OS_USERNAME": "user",
    "OS_PASSWORD": "s3cret",
    "OS_PROJECT_NAME": "project",
    "OS_REGION_NAME": "WAW1",
    "SWIFTSTORE_CONTAINER": "blocks",
}


def test_openrc_variables_map_to_options() -> None:
    assert options_from_env(OPENRC) == {
        "openstackAuthURL": "https://auth.example.net/v3",
        "privateOpenstackUsername": "user",
        "privateOpenstackPassword": "s3cret",
        "privateOpenstackTenantName": "project",
        "openstackRegion": "WAW1",
        "openstackContainer": "blocks",
    }


def test_tenant_name_fallback() -> None:
    env = {k: v for k, v in OPENRC.items() if k != "OS_PROJECT_NAME"}
    env["OS_TENANT_NAME"] = "legacy-tenant"

    assert options_from_env(env)["privateOpenstackTenantName"] == "legacy-tenant"


def test_project_name_wins_over_tenant_name() -> None:
    env = dict(OPENRC, OS_TENANT_NAME="legacy-tenant")

    assert options_from_env(env)["privateOpenstackTenantName"] == "project"


def test_empty_and_unset_variables_are_omitted() -> None:
    env = {"OS_AUTH_URL": "  ", "OS_USERNAME": "user"}

    assert options_from_env(env) == {"privateOpenstackUsername": "user"}


def test_domains_are_read() -> None:
    env = dict(OPENRC, OS_USER_DOMAIN_NAME="Default", OS_PROJECT_DOMAIN_NAME="Default")

    options = options_from_env(env)

    assert options["openstackUserDomainName"] == "Default"
    assert options["openstackProjectDomainName"] == "Default"


def test_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for key, value in OPENRC.items():
        monkeypatch.setenv(key, value)

    assert options_from_env()["openstackRegion"] == "WAW1"


def test_dial_opts_apply_every_option() -> None:
    collected: dict[str, str] = {}
    for apply in dial_opts_from_env(OPENRC):
        apply(collected)

    assert collected == options_from_env(OPENRC)
