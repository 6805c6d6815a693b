# site_deploy/core/adapter_registry.py
"""Registry mapping platform keys to lazily constructed adapters"""

import importlib
import logging
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from ..api.exceptions import UnsupportedPlatformError
from ..constants import DeployPlatform, RegistryReason
from ..models.platform import PlatformInfo
from .platforms import SUPPORTED_PLATFORMS

if TYPE_CHECKING:
    from ..adapters.base import DeployAdapter

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[], "DeployAdapter"]

# Built-in adapters as (module, class) relative to site_deploy.adapters
BUILTIN_ADAPTERS: Dict[str, tuple] = {
    DeployPlatform.NETLIFY.value: ("netlify", "NetlifyAdapter"),
    DeployPlatform.VERCEL.value: ("vercel", "VercelAdapter"),
    DeployPlatform.CLOUDFLARE.value: ("cloudflare", "CloudflareAdapter"),
    DeployPlatform.GITHUB_PAGES.value: ("github_pages", "GitHubPagesAdapter"),
    DeployPlatform.SURGE.value: ("surge", "SurgeAdapter"),
    DeployPlatform.FTP.value: ("ftp", "FTPAdapter"),
    DeployPlatform.SFTP.value: ("sftp", "SFTPAdapter"),
    DeployPlatform.SSH.value: ("ssh", "SSHAdapter"),
    DeployPlatform.CUSTOM.value: ("custom", "CustomAdapter"),
}


def lazy_factory(module_name: str, class_name: str) -> AdapterFactory:
    """Factory that imports the adapter module on first call"""

    def factory():
        module = importlib.import_module(f"site_deploy.adapters.{module_name}")
        return getattr(module, class_name)()

    return factory


def _key(platform) -> str:
    return platform.value if isinstance(platform, DeployPlatform) else str(platform)


class AdapterRegistry:
    """Platform key -> adapter, constructed on first use

    A factory that fails is remembered: later lookups raise the same
    ``construction_failed`` error instead of silently retrying.
    """

    def __init__(self, include_builtins: bool = True):
        self._factories: Dict[str, AdapterFactory] = {}
        self._instances: Dict[str, "DeployAdapter"] = {}
        self._failures: Dict[str, BaseException] = {}
        self._info: Dict[str, PlatformInfo] = {}

        if include_builtins:
            for info in SUPPORTED_PLATFORMS:
                module_name, class_name = BUILTIN_ADAPTERS[info.id]
                self.register(info.id, lazy_factory(module_name, class_name), info)

    def register(self, platform, factory: AdapterFactory,
                 info: Optional[PlatformInfo] = None) -> None:
        """
        Register or replace a platform

        Args:
            platform: Platform key
            factory: Zero-argument callable returning an adapter
            info: Static platform metadata
        """
        key = _key(platform)
        if key in self._factories:
            logger.debug("Replacing adapter factory for %s", key)

        self._factories[key] = factory
        self._instances.pop(key, None)
        self._failures.pop(key, None)
        if info is not None:
            self._info[key] = info

    def has(self, platform) -> bool:
        return _key(platform) in self._factories

    def platforms(self) -> List[str]:
        """Registered platform keys, in registration order"""
        return list(self._factories)

    def get(self, platform) -> "DeployAdapter":
        """
        Adapter for a platform

        Raises:
            UnsupportedPlatformError: If the platform is unknown or its adapter failed to construct
        """
        key = _key(platform)

        if key in self._instances:
            return self._instances[key]

        if key in self._failures:
            raise UnsupportedPlatformError(key, RegistryReason.CONSTRUCTION_FAILED, self._failures[key])

        factory = self._factories.get(key)
        if factory is None:
            raise UnsupportedPlatformError(key, RegistryReason.NOT_REGISTERED)

        try:
            adapter = factory()
        except Exception as e:
            logger.warning("Failed to construct adapter for %s: %s", key, e)
            self._failures[key] = e
            raise UnsupportedPlatformError(key, RegistryReason.CONSTRUCTION_FAILED, e) from e

        self._instances[key] = adapter
        logger.debug("Constructed adapter for %s", key)
        return adapter

    def get_platform_info(self, platform) -> Optional[PlatformInfo]:
        """Static metadata, available without constructing the adapter"""
        return self._info.get(_key(platform))

    def get_all_platform_info(self) -> List[PlatformInfo]:
        return [self._info[key] for key in self._factories if key in self._info]

    def preload_all(self) -> Dict[str, Optional[BaseException]]:
        """
        Construct every registered adapter

        Returns:
            Mapping of platform key to the construction error, or None on success
        """
        outcome = {}
        for key in self.platforms():
            try:
                self.get(key)
                outcome[key] = None
            except UnsupportedPlatformError as e:
                outcome[key] = e.cause or e
        return outcome
