"""Static metadata and config field schemas of the built-in platforms"""

from typing import Dict, List, Optional

from ..constants import DEFAULT_FTP_PORT, DEFAULT_SSH_PORT, DeployPlatform, FieldType
from ..models.platform import ConfigField, PlatformInfo


def _server_fields(prefix: str, default_port: int, key_auth: bool) -> List[ConfigField]:
    """Connection fields shared by FTP, SFTP and SSH"""
    fields = [
        ConfigField("host", "Server host", FieldType.TEXT, required=True,
                    placeholder=f"{prefix.lower()}.example.com", env_var=f"{prefix}_HOST"),
        ConfigField("port", "Port", FieldType.NUMBER, default=default_port,
                    placeholder=str(default_port)),
        ConfigField("username", "Username", FieldType.TEXT, required=True,
                    env_var=f"{prefix}_USER"),
        ConfigField("password", "Password", FieldType.PASSWORD, required=not key_auth,
                    placeholder="password" if not key_auth else "password (or use a private key)",
                    env_var=f"{prefix}_PASSWORD"),
    ]
    if key_auth:
        fields.extend([
            ConfigField("private_key", "Private key path", FieldType.FILE,
                        placeholder="~/.ssh/id_rsa", env_var=f"{prefix}_KEY"),
            ConfigField("passphrase", "Key passphrase", FieldType.PASSWORD),
        ])
    fields.extend([
        ConfigField("remote_path", "Remote directory", FieldType.TEXT, required=True,
                    placeholder="/var/www/html"),
        ConfigField("clean_remote", "Clean remote directory", FieldType.BOOLEAN, default=False),
    ])
    return fields


NETLIFY = PlatformInfo(
    id=DeployPlatform.NETLIFY.value,
    name="Netlify",
    icon="🔷",
    description="Deploy to Netlify with CI/CD, custom domains and serverless functions",
    docs_url="https://docs.netlify.com/",
    requires_auth=True,
    auth_type="token",
    supports_preview=True,
    supports_custom_domain=True,
    supports_rollback=True,
    config_fields=[
        ConfigField("auth_token", "Access token", FieldType.PASSWORD, required=True,
                    placeholder="nfp_xxxxx", help="From your Netlify user settings",
                    env_var="NETLIFY_AUTH_TOKEN"),
        ConfigField("site_id", "Site ID", FieldType.TEXT, placeholder="your-site-name or site id",
                    env_var="NETLIFY_SITE_ID"),
        ConfigField("prod", "Production deploy", FieldType.BOOLEAN, default=False,
                    help="Publish to the production URL"),
        ConfigField("functions_dir", "Functions directory", FieldType.TEXT,
                    placeholder="netlify/functions"),
    ],
)

VERCEL = PlatformInfo(
    id=DeployPlatform.VERCEL.value,
    name="Vercel",
    icon="▲",
    description="Deploy to Vercel with automatic HTTPS and edge network",
    docs_url="https://vercel.com/docs",
    requires_auth=True,
    auth_type="token",
    supports_preview=True,
    supports_custom_domain=True,
    supports_rollback=True,
    config_fields=[
        ConfigField("token", "Access token", FieldType.PASSWORD, required=True,
                    help="From your Vercel account settings", env_var="VERCEL_TOKEN"),
        ConfigField("project_name", "Project name", FieldType.TEXT),
        ConfigField("org_id", "Organization ID", FieldType.TEXT, placeholder="team_xxxxx",
                    env_var="VERCEL_ORG_ID"),
        ConfigField("prod", "Production deploy", FieldType.BOOLEAN, default=False),
    ],
)

CLOUDFLARE = PlatformInfo(
    id=DeployPlatform.CLOUDFLARE.value,
    name="Cloudflare Pages",
    icon="☁️",
    description="Deploy to Cloudflare Pages with global CDN and free SSL",
    docs_url="https://developers.cloudflare.com/pages/",
    requires_auth=True,
    auth_type="token",
    supports_preview=True,
    supports_custom_domain=True,
    supports_rollback=True,
    config_fields=[
        ConfigField("api_token", "API token", FieldType.PASSWORD, required=True,
                    help="Needs Cloudflare Pages edit permission", env_var="CLOUDFLARE_API_TOKEN"),
        ConfigField("account_id", "Account ID", FieldType.TEXT, required=True,
                    env_var="CLOUDFLARE_ACCOUNT_ID"),
        ConfigField("project_name", "Project name", FieldType.TEXT, required=True),
        ConfigField("branch", "Branch", FieldType.TEXT, default="main", placeholder="main"),
    ],
)

GITHUB_PAGES = PlatformInfo(
    id=DeployPlatform.GITHUB_PAGES.value,
    name="GitHub Pages",
    icon="🐙",
    description="Publish to GitHub Pages from a repository branch",
    docs_url="https://docs.github.com/pages",
    requires_auth=True,
    auth_type="token",
    supports_preview=False,
    supports_custom_domain=True,
    supports_rollback=False,
    config_fields=[
        ConfigField("token", "GitHub token", FieldType.PASSWORD, required=True,
                    placeholder="ghp_xxxxx", help="Needs repo scope", env_var="GITHUB_TOKEN"),
        ConfigField("repo", "Repository", FieldType.TEXT, required=True,
                    placeholder="username/repo", pattern=r"[\w.-]+/[\w.-]+"),
        ConfigField("branch", "Branch", FieldType.TEXT, default="gh-pages", placeholder="gh-pages"),
        ConfigField("cname", "Custom domain", FieldType.TEXT, placeholder="example.com"),
        ConfigField("nojekyll", "Disable Jekyll", FieldType.BOOLEAN, default=True),
    ],
)

SURGE = PlatformInfo(
    id=DeployPlatform.SURGE.value,
    name="Surge",
    icon="⚡",
    description="Publish a static site to surge.sh",
    docs_url="https://surge.sh/help/",
    requires_auth=True,
    auth_type="token",
    supports_preview=False,
    supports_custom_domain=True,
    supports_rollback=False,
    config_fields=[
        ConfigField("token", "Surge token", FieldType.PASSWORD, required=True,
                    help="Run `surge token` to get one", env_var="SURGE_TOKEN"),
        ConfigField("domain", "Domain", FieldType.TEXT, required=True,
                    placeholder="your-site.surge.sh"),
    ],
)

FTP = PlatformInfo(
    id=DeployPlatform.FTP.value,
    name="FTP server",
    icon="📂",
    description="Upload to a server over FTP",
    requires_auth=True,
    auth_type="password",
    config_fields=_server_fields("FTP", DEFAULT_FTP_PORT, key_auth=False) + [
        ConfigField("secure", "Use TLS", FieldType.BOOLEAN, default=False),
        ConfigField("passive", "Passive mode", FieldType.BOOLEAN, default=True),
    ],
)

SFTP = PlatformInfo(
    id=DeployPlatform.SFTP.value,
    name="SFTP server",
    icon="🔐",
    description="Upload to a server over SFTP",
    requires_auth=True,
    auth_type="key",
    config_fields=_server_fields("SFTP", DEFAULT_SSH_PORT, key_auth=True),
)

SSH = PlatformInfo(
    id=DeployPlatform.SSH.value,
    name="SSH/SCP",
    icon="🖥️",
    description="Deploy to a server over SSH with optional remote commands",
    requires_auth=True,
    auth_type="key",
    config_fields=_server_fields("SSH", DEFAULT_SSH_PORT, key_auth=True) + [
        ConfigField("concurrency", "Parallel uploads", FieldType.NUMBER, default=5),
    ],
)

CUSTOM = PlatformInfo(
    id=DeployPlatform.CUSTOM.value,
    name="Custom command",
    icon="⚙️",
    description="Deploy with a command of your own",
    requires_auth=False,
    config_fields=[
        ConfigField("command", "Deploy command", FieldType.TEXT, required=True,
                    placeholder="npm run deploy"),
        ConfigField("cwd", "Working directory", FieldType.TEXT, placeholder="project root"),
    ],
)

SUPPORTED_PLATFORMS: List[PlatformInfo] = [
    NETLIFY, VERCEL, CLOUDFLARE, GITHUB_PAGES, SURGE, FTP, SFTP, SSH, CUSTOM,
]

_BY_ID: Dict[str, PlatformInfo] = {info.id: info for info in SUPPORTED_PLATFORMS}


def get_platform_info(platform: str) -> Optional[PlatformInfo]:
    """Static info of a built-in platform, or None"""
    return _BY_ID.get(platform)
