"""Netlify adapter"""

import re
from typing import Dict, List

from ..constants import DeployPhase, DeployPlatform
from ..models.deploy_config import NetlifyDeployConfig
from ..models.result import DeployResult
from .base import UploadFile
from .platform_cli import PlatformCliAdapter

DRAFT_URL_PATTERN = re.compile(r"Website Draft URL:\s*(https?://\S+)")
SITE_URL_PATTERN = re.compile(r"Website URL:\s*(https?://\S+)")
UNIQUE_URL_PATTERN = re.compile(r"Unique Deploy URL:\s*(https?://\S+)")


class NetlifyAdapter(PlatformCliAdapter):
    """Deploy with ``netlify deploy``"""

    platform = DeployPlatform.NETLIFY.value
    display_name = "Netlify"
    icon = "🔷"
    description = "Deploy to Netlify with CI/CD, custom domains and serverless functions"

    progress_markers = (
        ("Uploading", DeployPhase.UPLOAD, 60, 30, "Uploading files..."),
        ("Deploy is live", DeployPhase.PROCESS, 92, 50, "Deploy is live"),
    )

    def build_args(self, config: NetlifyDeployConfig, files: List[UploadFile]) -> List[str]:
        args = ["netlify", "deploy", "--dir", str(self.resolve_dist_dir(config))]
        if config.prod:
            args.append("--prod")
        if config.site_id:
            args.extend(["--site", config.site_id])
        if config.alias:
            args.extend(["--alias", config.alias])
        if config.functions_dir:
            args.extend(["--functions", config.functions_dir])
        return args

    def build_env(self, config: NetlifyDeployConfig) -> Dict[str, str]:
        env = {}
        token = self.env_value(config.auth_token, "NETLIFY_AUTH_TOKEN")
        if token:
            env["NETLIFY_AUTH_TOKEN"] = token
        site_id = self.env_value(config.site_id, "NETLIFY_SITE_ID")
        if site_id:
            env["NETLIFY_SITE_ID"] = site_id
        return env

    def parse_line(self, line: str, urls: Dict[str, str]) -> None:
        draft = DRAFT_URL_PATTERN.search(line)
        if draft:
            urls["deploy_url"] = draft.group(1)

        # "Website URL" is a suffix of "Website Draft URL"
        site = SITE_URL_PATTERN.search(line)
        if site and not draft:
            urls["site_url"] = site.group(1)

        unique = UNIQUE_URL_PATTERN.search(line)
        if unique:
            urls["deploy_url"] = unique.group(1)

    def build_result(self, config: NetlifyDeployConfig, urls: Dict[str, str],
                     files: List[UploadFile]) -> DeployResult:
        site_url = urls.get("site_url")
        deploy_url = urls.get("deploy_url")
        return self.create_success_result(
            site_url if config.prod else deploy_url,
            preview_url=deploy_url,
            platform_info={
                "site_url": site_url,
                "deploy_url": deploy_url,
                "files": len(files),
            },
        )
