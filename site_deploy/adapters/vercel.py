"""Vercel adapter"""

import re
from typing import Dict, List

from ..constants import DeployPhase, DeployPlatform
from ..models.deploy_config import VercelDeployConfig
from .base import UploadFile
from .platform_cli import PlatformCliAdapter


class VercelAdapter(PlatformCliAdapter):
    """Deploy with the ``vercel`` CLI"""

    platform = DeployPlatform.VERCEL.value
    display_name = "Vercel"
    icon = "▲"
    description = "Deploy to Vercel with automatic HTTPS and edge network"

    url_pattern = re.compile(r"(https?://\S+\.vercel\.app)")
    progress_markers = (
        ("Uploading", DeployPhase.UPLOAD, 60, 30, "Uploading files..."),
        ("Building", DeployPhase.PROCESS, 75, 50, "Vercel is building..."),
        ("Ready", DeployPhase.PROCESS, 92, 90, "Deployment ready"),
    )

    def build_args(self, config: VercelDeployConfig, files: List[UploadFile]) -> List[str]:
        args = ["vercel", str(self.resolve_dist_dir(config)), "--yes"]
        if config.prod:
            args.append("--prod")
        if config.project_name:
            args.extend(["--name", config.project_name])
        token = self.env_value(config.token, "VERCEL_TOKEN")
        if token:
            args.extend(["--token", token])
        for key, value in config.env.items():
            args.extend(["--env", f"{key}={value}"])
        for key, value in config.build_env.items():
            args.extend(["--build-env", f"{key}={value}"])
        return args

    def build_env(self, config: VercelDeployConfig) -> Dict[str, str]:
        env = {}
        org_id = self.env_value(config.org_id, "VERCEL_ORG_ID")
        if org_id:
            env["VERCEL_ORG_ID"] = org_id
        project_id = self.environ.get("VERCEL_PROJECT_ID")
        if project_id:
            env["VERCEL_PROJECT_ID"] = project_id
        return env
