"""Global constants for site-deploy"""

import re
from enum import Enum

APP_NAME = "site-deploy"
LOG_FORMAT = "%(message)s"

# Project identification
PROJECT_CONFIG_FILE = ".site-deploy.yaml"

# Directory structure
DEFAULT_DIST_DIR = "dist"
DEFAULT_STATE_DIR = ".site-deploy"
HISTORY_FILE_NAME = "deploy-history.json"
SAVED_CONFIGS_FILE_NAME = "deploy-configs.json"

# Default configuration values
DEFAULT_MAX_HISTORY_ENTRIES = 50
DEFAULT_BUILD_COMMAND = "pnpm run build"
DEFAULT_RETRY_DELAY = 2  # seconds
DEFAULT_SSH_CONCURRENCY = 5
DEFAULT_SSH_PORT = 22
DEFAULT_FTP_PORT = 21

# Directories never uploaded, wherever they appear in the artifact tree
ALWAYS_EXCLUDED_DIRS = ["node_modules"]

# Secret handling
SENSITIVE_KEYS = ["password", "token", "auth_token", "api_token", "private_key", "passphrase"]
ENCRYPTED_MARKER_SUFFIX = "_encrypted"
SECRET_MASK = "***"
CREDENTIAL_KEY = "site-deploy-credential-key"

# Output parsing
ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")
URL_PATTERN = re.compile(r"https?://\S+")
NPM_WARNING_MARKER = "npm warn"


class DeployPlatform(str, Enum):
    """Built-in deployment platforms"""
    NETLIFY = "netlify"
    VERCEL = "vercel"
    CLOUDFLARE = "cloudflare"
    GITHUB_PAGES = "github-pages"
    SURGE = "surge"
    FTP = "ftp"
    SFTP = "sftp"
    SSH = "ssh"
    CUSTOM = "custom"


class DeployStatus(str, Enum):
    """Coarse deployment state shown to callers"""
    IDLE = "idle"
    PREPARING = "preparing"
    BUILDING = "building"
    UPLOADING = "uploading"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"


class DeployPhase(str, Enum):
    """Fine-grained deployment phase, drives the progress percentage"""
    INIT = "init"
    VALIDATE = "validate"
    BUILD = "build"
    PREPARE = "prepare"
    UPLOAD = "upload"
    PROCESS = "process"
    VERIFY = "verify"
    COMPLETE = "complete"


class DeployLogLevel(str, Enum):
    """Deployment log levels"""
    DEBUG = "debug"
    INFO = "info"
    SUCCESS = "success"
    WARN = "warn"
    ERROR = "error"


class DeployEnvironment(str, Enum):
    """Target environment of a deployment"""
    PRODUCTION = "production"
    PREVIEW = "preview"
    DEVELOPMENT = "development"


class FieldType(str, Enum):
    """Config field types understood by the validator"""
    TEXT = "text"
    PASSWORD = "password"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    FILE = "file"


# Error codes
class ErrorCode:
    CONFIG_ERROR = "SD001"
    VALIDATION_FAILED = "SD002"
    UNSUPPORTED_PLATFORM = "SD003"
    BUILD_FAILED = "SD004"
    TRANSFER_FAILED = "SD005"
    DIST_DIR_INVALID = "SD006"
    DEPLOY_CANCELLED = "SD007"
    DEPLOYMENT_IN_PROGRESS = "SD008"
    STORAGE_ERROR = "SD009"


# Registry failure reasons
class RegistryReason:
    NOT_REGISTERED = "not_registered"
    CONSTRUCTION_FAILED = "construction_failed"


# Environment variables
ENV_LOG_LEVEL = "SITE_DEPLOY_LOG_LEVEL"
ENV_BUILD_COMMAND = "SITE_DEPLOY_BUILD_COMMAND"
ENV_MAX_HISTORY = "SITE_DEPLOY_MAX_HISTORY"
ENV_STATE_DIR = "SITE_DEPLOY_STATE_DIR"

# Recognised credential variables per platform
PLATFORM_ENV_VARS = {
    DeployPlatform.NETLIFY.value: ["NETLIFY_AUTH_TOKEN", "NETLIFY_SITE_ID"],
    DeployPlatform.VERCEL.value: ["VERCEL_TOKEN", "VERCEL_ORG_ID", "VERCEL_PROJECT_ID"],
    DeployPlatform.CLOUDFLARE.value: ["CLOUDFLARE_API_TOKEN", "CLOUDFLARE_ACCOUNT_ID"],
    DeployPlatform.GITHUB_PAGES.value: ["GITHUB_TOKEN", "GH_TOKEN"],
    DeployPlatform.SURGE.value: ["SURGE_TOKEN"],
    DeployPlatform.FTP.value: ["FTP_HOST", "FTP_USER", "FTP_PASSWORD"],
    DeployPlatform.SFTP.value: ["SFTP_HOST", "SFTP_USER", "SFTP_PASSWORD", "SFTP_KEY"],
    DeployPlatform.SSH.value: ["SSH_HOST", "SSH_USER", "SSH_PASSWORD", "SSH_KEY"],
    DeployPlatform.CUSTOM.value: [],
}

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_ROCKET = "🚀"

# Messages templates
MSG_DEPLOY_START = "Starting deployment to {platform}"
MSG_DEPLOY_SUCCESS = "Deployment succeeded! URL: {url}"
MSG_DEPLOY_FAILED = "Deployment failed: {error}"
MSG_DEPLOY_CANCELLED = "Deployment cancelled"
MSG_RETRY = "Attempt {attempt} failed, retrying in {delay}s..."
