"""Saved deployment configurations"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from ..api.exceptions import ConfigError
from ..constants import DEFAULT_STATE_DIR, PLATFORM_ENV_VARS, SAVED_CONFIGS_FILE_NAME
from ..core.credential_codec import CredentialCodec
from ..models.result import SavedDeployConfig, utcnow
from ..storage.json_store import JsonListStore
from .config_service import ConfigService

logger = logging.getLogger(__name__)


class DeployConfigStore:
    """Named deploy configs kept in ``<project>/.site-deploy/deploy-configs.json``

    Secrets are encoded with ``CredentialCodec`` before they reach disk.
    Every change reloads and rewrites the whole file, so two processes
    saving at once are not coordinated and the last writer wins.
    """

    def __init__(self, project_root: Union[str, Path],
                 config_path: Optional[Union[str, Path]] = None,
                 codec: Optional[CredentialCodec] = None):
        self.project_root = Path(project_root)
        path = Path(config_path) if config_path else \
            self.project_root / DEFAULT_STATE_DIR / SAVED_CONFIGS_FILE_NAME
        self.store = JsonListStore(path)
        self.codec = codec or CredentialCodec()

    @property
    def config_path(self) -> Path:
        return self.store.path

    def _load(self) -> List[SavedDeployConfig]:
        configs = []
        for record in self.store.load():
            try:
                configs.append(SavedDeployConfig.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed saved config: %s", e)
        return configs

    def _save(self, configs: List[SavedDeployConfig]) -> None:
        self.store.save([c.to_dict() for c in configs])

    def _decrypted(self, saved: SavedDeployConfig) -> SavedDeployConfig:
        try:
            config = self.codec.decrypt_config(saved.config)
        except ValueError as e:
            raise ConfigError(f"Saved config '{saved.name}' has unreadable credentials: {e}") from e
        return SavedDeployConfig(
            name=saved.name,
            platform=saved.platform,
            config=config,
            is_default=saved.is_default,
            created_at=saved.created_at,
            updated_at=saved.updated_at,
            last_deploy_at=saved.last_deploy_at,
        )

    def get_saved_configs(self) -> List[SavedDeployConfig]:
        """All saved configs with secrets masked"""
        configs = self._load()
        for saved in configs:
            saved.config = self.codec.mask_config(saved.config)
        return configs

    def get_config(self, name: str) -> Optional[SavedDeployConfig]:
        """Saved config by name, secrets decoded"""
        for saved in self._load():
            if saved.name == name:
                return self._decrypted(saved)
        return None

    def get_default_config(self) -> Optional[SavedDeployConfig]:
        for saved in self._load():
            if saved.is_default:
                return self._decrypted(saved)
        return None

    def save_config(self, name: str, platform: str, config: Dict[str, Any],
                    is_default: bool = False) -> SavedDeployConfig:
        """
        Create or replace a saved config

        Args:
            name: Unique config name
            platform: Platform key
            config: Plain config values; secrets are encoded before writing
            is_default: Make this the only default config

        Returns:
            The stored entry (secrets encoded)
        """
        if not name:
            raise ConfigError("Saved config name cannot be empty")

        configs = self._load()
        now = utcnow()
        existing = next((c for c in configs if c.name == name), None)

        stored_config = self.codec.encrypt_config(
            {k: v for k, v in config.items() if v is not None}
        )
        saved = SavedDeployConfig(
            name=name,
            platform=platform,
            config=stored_config,
            is_default=is_default,
            created_at=existing.created_at if existing else now,
            updated_at=now,
            last_deploy_at=existing.last_deploy_at if existing else None,
        )

        if existing:
            configs[configs.index(existing)] = saved
        else:
            configs.append(saved)

        if is_default:
            for other in configs:
                if other.name != name:
                    other.is_default = False

        self._save(configs)
        logger.info("Saved deploy config '%s'", name)
        return saved

    def delete_config(self, name: str) -> bool:
        """Remove a saved config; False if it did not exist"""
        configs = self._load()
        remaining = [c for c in configs if c.name != name]
        if len(remaining) == len(configs):
            return False

        self._save(remaining)
        logger.info("Deleted deploy config '%s'", name)
        return True

    def set_default_config(self, name: str) -> bool:
        """Make ``name`` the only default; False if it does not exist"""
        configs = self._load()
        if not any(c.name == name for c in configs):
            return False

        for saved in configs:
            saved.is_default = saved.name == name
        self._save(configs)
        return True

    def update_last_deploy_time(self, name: str) -> bool:
        configs = self._load()
        for saved in configs:
            if saved.name == name:
                saved.last_deploy_at = utcnow()
                self._save(configs)
                return True
        return False

    @staticmethod
    def detect_env_credentials(platform: str,
                               environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Credential variables for a platform that are set in the environment

        Args:
            platform: Platform key
            environ: Environment to inspect (defaults to os.environ)

        Returns:
            Mapping of variable name to value, only non-empty ones
        """
        env = environ if environ is not None else os.environ
        return {
            name: env[name]
            for name in PLATFORM_ENV_VARS.get(platform, [])
            if env.get(name)
        }

    def read_from_project_config(self) -> Optional[Dict[str, Any]]:
        """``deploy:`` section of the project settings file, if any"""
        section = ConfigService(self.project_root).get_deploy_section()
        return section or None
