"""Cloudflare Pages adapter"""

import re
from typing import Dict, List

from ..constants import DeployPhase, DeployPlatform
from ..models.deploy_config import CloudflareDeployConfig
from .base import UploadFile
from .platform_cli import PlatformCliAdapter


class CloudflareAdapter(PlatformCliAdapter):
    """Deploy with ``wrangler pages deploy``"""

    platform = DeployPlatform.CLOUDFLARE.value
    display_name = "Cloudflare Pages"
    icon = "☁️"
    description = "Deploy to Cloudflare Pages with global CDN and free SSL"

    url_pattern = re.compile(r"(https?://[^\s]+\.pages\.dev)")
    progress_markers = (
        ("Uploading", DeployPhase.UPLOAD, 60, 30, "Uploading files..."),
        ("Success", DeployPhase.PROCESS, 92, 90, "Upload complete"),
    )

    def build_args(self, config: CloudflareDeployConfig, files: List[UploadFile]) -> List[str]:
        args = [
            "wrangler", "pages", "deploy", str(self.resolve_dist_dir(config)),
            "--project-name", config.project_name,
        ]
        if config.branch:
            args.extend(["--branch", config.branch])
        if config.commit_message:
            args.extend(["--commit-message", config.commit_message])
        return args

    def build_env(self, config: CloudflareDeployConfig) -> Dict[str, str]:
        env = {}
        api_token = self.env_value(config.api_token, "CLOUDFLARE_API_TOKEN")
        if api_token:
            env["CLOUDFLARE_API_TOKEN"] = api_token
        account_id = self.env_value(config.account_id, "CLOUDFLARE_ACCOUNT_ID")
        if account_id:
            env["CLOUDFLARE_ACCOUNT_ID"] = account_id
        return env
