# site_deploy/models/deploy_config.py
"""Deployment configuration models, one variant per platform"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type

from ..constants import DEFAULT_DIST_DIR, DeployEnvironment, DeployPlatform

# Hook invoked after a successful deployment; may return an awaitable
AfterDeployHook = Callable[[Any], Any]

# Fields that only exist at runtime and are never written to disk
_RUNTIME_FIELDS = {"after_deploy"}


@dataclass
class DeployConfig:
    """Options shared by every platform"""

    platform: str
    dist_dir: str = DEFAULT_DIST_DIR
    build_before_deploy: bool = True
    environment: Optional[DeployEnvironment] = None
    timeout: Optional[float] = None
    retries: int = 0
    open_after_deploy: bool = False
    after_deploy: Optional[AfterDeployHook] = field(default=None, repr=False, compare=False)

    @property
    def platform_key(self) -> str:
        """Registry key for this config"""
        if isinstance(self.platform, DeployPlatform):
            return self.platform.value
        return str(self.platform)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary (runtime hooks dropped)"""
        data = {}
        for f in dataclasses.fields(self):
            if f.name in _RUNTIME_FIELDS:
                continue
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, DeployPlatform) or isinstance(value, DeployEnvironment):
                value = value.value
            elif isinstance(value, (list, dict)):
                value = type(value)(value)
            data[f.name] = value
        data["platform"] = self.platform_key
        return data

    def merge(self, overrides: Dict[str, Any]) -> "DeployConfig":
        """Return a copy with ``overrides`` applied on top"""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        merged = DeployConfig.from_dict(data)
        merged.after_deploy = self.after_deploy
        return merged

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeployConfig":
        """Create the platform variant matching ``data['platform']``

        Unknown keys are ignored and missing keys fall back to defaults, so
        untyped user input never fails here. Required fields are checked by
        the platform adapter.
        """
        platform = data.get("platform")
        if isinstance(platform, DeployPlatform):
            platform = platform.value
        if not platform:
            raise ValueError("Deploy config requires 'platform'")

        variant = CONFIG_VARIANTS.get(platform, DeployConfig)
        known = {f.name for f in dataclasses.fields(variant)}
        kwargs = {k: v for k, v in data.items() if k in known}
        kwargs["platform"] = platform

        environment = kwargs.get("environment")
        if environment and not isinstance(environment, DeployEnvironment):
            kwargs["environment"] = DeployEnvironment(environment)

        return variant(**kwargs)


@dataclass
class NetlifyDeployConfig(DeployConfig):
    platform: str = DeployPlatform.NETLIFY.value
    auth_token: Optional[str] = None
    site_id: Optional[str] = None
    prod: bool = False
    alias: Optional[str] = None
    functions_dir: Optional[str] = None


@dataclass
class VercelDeployConfig(DeployConfig):
    platform: str = DeployPlatform.VERCEL.value
    token: Optional[str] = None
    project_name: Optional[str] = None
    org_id: Optional[str] = None
    prod: bool = False
    env: Dict[str, str] = field(default_factory=dict)
    build_env: Dict[str, str] = field(default_factory=dict)


@dataclass
class CloudflareDeployConfig(DeployConfig):
    platform: str = DeployPlatform.CLOUDFLARE.value
    api_token: Optional[str] = None
    account_id: Optional[str] = None
    project_name: Optional[str] = None
    branch: Optional[str] = None
    commit_message: Optional[str] = None


@dataclass
class GitHubPagesDeployConfig(DeployConfig):
    platform: str = DeployPlatform.GITHUB_PAGES.value
    token: Optional[str] = None
    repo: Optional[str] = None  # owner/repo
    branch: str = "gh-pages"
    cname: Optional[str] = None
    nojekyll: bool = True
    commit_message: Optional[str] = None


@dataclass
class SurgeDeployConfig(DeployConfig):
    platform: str = DeployPlatform.SURGE.value
    token: Optional[str] = None
    domain: Optional[str] = None


@dataclass
class FTPDeployConfig(DeployConfig):
    platform: str = DeployPlatform.FTP.value
    host: Optional[str] = None
    port: Optional[int] = None
    username: Optional[str] = None
    password: Optional[str] = None
    remote_path: str = "/"
    passive: bool = True
    secure: bool = False
    clean_remote: bool = False
    exclude: List[str] = field(default_factory=list)
    include: List[str] = field(default_factory=list)


@dataclass
class SFTPDeployConfig(DeployConfig):
    platform: str = DeployPlatform.SFTP.value
    host: Optional[str] = None
    port: Optional[int] = None
    username: Optional[str] = None
    password: Optional[str] = None
    private_key: Optional[str] = None
    passphrase: Optional[str] = None
    remote_path: Optional[str] = None
    clean_remote: bool = False
    exclude: List[str] = field(default_factory=list)
    include: List[str] = field(default_factory=list)


@dataclass
class SSHDeployConfig(DeployConfig):
    platform: str = DeployPlatform.SSH.value
    host: Optional[str] = None
    port: Optional[int] = None
    username: Optional[str] = None
    password: Optional[str] = None
    private_key: Optional[str] = None
    passphrase: Optional[str] = None
    remote_path: Optional[str] = None
    clean_remote: bool = False
    exclude: List[str] = field(default_factory=list)
    pre_commands: List[str] = field(default_factory=list)
    post_commands: List[str] = field(default_factory=list)
    concurrency: Optional[int] = None


@dataclass
class CustomDeployConfig(DeployConfig):
    platform: str = DeployPlatform.CUSTOM.value
    command: Optional[str] = None
    args: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    cwd: Optional[str] = None


CONFIG_VARIANTS: Dict[str, Type[DeployConfig]] = {
    DeployPlatform.NETLIFY.value: NetlifyDeployConfig,
    DeployPlatform.VERCEL.value: VercelDeployConfig,
    DeployPlatform.CLOUDFLARE.value: CloudflareDeployConfig,
    DeployPlatform.GITHUB_PAGES.value: GitHubPagesDeployConfig,
    DeployPlatform.SURGE.value: SurgeDeployConfig,
    DeployPlatform.FTP.value: FTPDeployConfig,
    DeployPlatform.SFTP.value: SFTPDeployConfig,
    DeployPlatform.SSH.value: SSHDeployConfig,
    DeployPlatform.CUSTOM.value: CustomDeployConfig,
}
