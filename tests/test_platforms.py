"""Tests for the platform catalog and adapter registry."""

from unittest.mock import MagicMock

import pytest

from site_deploy.adapters.base import DeployAdapter
from site_deploy.adapters.netlify import NetlifyAdapter
from site_deploy.api.exceptions import UnsupportedPlatformError
from site_deploy.constants import DeployPlatform, RegistryReason
from site_deploy.core.adapter_registry import AdapterRegistry
from site_deploy.core.platforms import SUPPORTED_PLATFORMS, get_platform_info
from site_deploy.models.platform import PlatformInfo


class TestPlatformCatalog:
    """Test static platform metadata."""

    def test_every_platform_is_listed(self):
        ids = [info.id for info in SUPPORTED_PLATFORMS]
        assert ids == [platform.value for platform in DeployPlatform]

    def test_get_platform_info(self):
        info = get_platform_info("netlify")
        assert info.name == "Netlify"
        assert info.required_fields == ["auth_token"]

    def test_unknown_platform(self):
        assert get_platform_info("heroku") is None

    def test_github_pages_repo_pattern(self):
        repo = get_platform_info("github-pages").get_field("repo")
        assert repo.required
        assert repo.pattern

    def test_key_auth_platforms_do_not_require_password(self):
        for platform in ("sftp", "ssh"):
            info = get_platform_info(platform)
            assert "password" not in info.required_fields
            assert info.get_field("private_key").env_var == f"{platform.upper()}_KEY"

    def test_ftp_requires_password(self):
        assert "password" in get_platform_info("ftp").required_fields

    def test_ssh_defaults(self):
        info = get_platform_info("ssh")
        assert info.get_field("port").default == 22
        assert info.get_field("concurrency").default == 5

    def test_to_dict(self):
        data = get_platform_info("custom").to_dict()
        assert data["id"] == "custom"
        assert data["config_fields"][0]["name"] == "command"


class TestAdapterRegistry:
    """Test adapter lookup and lazy construction."""

    def test_builtins_registered(self):
        registry = AdapterRegistry()
        assert registry.platforms() == [info.id for info in SUPPORTED_PLATFORMS]
        assert registry.has(DeployPlatform.SSH)

    def test_get_constructs_once(self):
        registry = AdapterRegistry()
        adapter = registry.get("netlify")

        assert isinstance(adapter, NetlifyAdapter)
        assert registry.get(DeployPlatform.NETLIFY) is adapter

    def test_unknown_platform(self):
        registry = AdapterRegistry()

        with pytest.raises(UnsupportedPlatformError) as exc_info:
            registry.get("heroku")

        assert exc_info.value.reason == RegistryReason.NOT_REGISTERED

    def test_info_without_construction(self):
        factory = MagicMock()
        registry = AdapterRegistry(include_builtins=False)
        registry.register("mine", factory, PlatformInfo(id="mine", name="Mine"))

        assert registry.get_platform_info("mine").name == "Mine"
        assert [info.id for info in registry.get_all_platform_info()] == ["mine"]
        factory.assert_not_called()

    def test_construction_failure_is_remembered(self):
        factory = MagicMock(side_effect=RuntimeError("missing SDK"))
        registry = AdapterRegistry(include_builtins=False)
        registry.register("broken", factory)

        for _ in range(2):
            with pytest.raises(UnsupportedPlatformError) as exc_info:
                registry.get("broken")
            assert exc_info.value.reason == RegistryReason.CONSTRUCTION_FAILED
            assert "missing SDK" in str(exc_info.value)

        factory.assert_called_once()

    def test_register_replaces_failed_factory(self):
        adapter = MagicMock(spec=DeployAdapter)
        registry = AdapterRegistry(include_builtins=False)
        registry.register("flaky", MagicMock(side_effect=RuntimeError("boom")))
        with pytest.raises(UnsupportedPlatformError):
            registry.get("flaky")

        registry.register("flaky", lambda: adapter)

        assert registry.get("flaky") is adapter

    def test_preload_all(self):
        error = RuntimeError("boom")
        registry = AdapterRegistry(include_builtins=False)
        registry.register("good", lambda: MagicMock(spec=DeployAdapter))
        registry.register("bad", MagicMock(side_effect=error))

        outcome = registry.preload_all()

        assert outcome == {"good": None, "bad": error}
