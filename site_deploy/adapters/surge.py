"""Surge adapter"""

from typing import Dict, List

from ..constants import DeployPhase, DeployPlatform
from ..models.deploy_config import SurgeDeployConfig
from ..models.result import DeployResult
from .base import UploadFile
from .platform_cli import PlatformCliAdapter


class SurgeAdapter(PlatformCliAdapter):
    """Publish with the ``surge`` CLI"""

    platform = DeployPlatform.SURGE.value
    display_name = "Surge"
    icon = "⚡"
    description = "Publish a static site to surge.sh"

    progress_markers = (
        ("Uploading", DeployPhase.UPLOAD, 60, 30, "Uploading files..."),
        ("Success", DeployPhase.PROCESS, 92, 90, "Published"),
    )

    def build_args(self, config: SurgeDeployConfig, files: List[UploadFile]) -> List[str]:
        return ["surge", str(self.resolve_dist_dir(config)), config.domain]

    def build_env(self, config: SurgeDeployConfig) -> Dict[str, str]:
        token = self.env_value(config.token, "SURGE_TOKEN")
        return {"SURGE_TOKEN": token} if token else {}

    def build_result(self, config: SurgeDeployConfig, urls: Dict[str, str],
                     files: List[UploadFile]) -> DeployResult:
        domain = config.domain
        url = domain if domain.startswith("http") else f"https://{domain}"
        return self.create_success_result(url, platform_info={"domain": domain, "files": len(files)})
