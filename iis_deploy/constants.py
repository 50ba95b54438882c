"""Global constants for iis-deploy"""

from enum import Enum
import re

APP_NAME = "iis-deploy"
LOG_FORMAT = "%(message)s"

# Configuration lookup
CONFIG_VERSION = "1.0"
PROJECT_CONFIG_FILE = ".iis-deploy.yaml"

# Directory structure
DEFAULT_WWWROOT_BASE = "D:\\wwwroot"
DEFAULT_DEPLOY_DIR = "deploy"
TEMP_EXTRACT_DIR = "temp-extract"
PACKAGE_TEMP_DIR = "_package_temp"
BACKUP_DIR = "backup"
BACKUP_PREFIX = "backup-"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"
ASSETS_DIR = "assets"
API_SUFFIX = "api"
API_POOL_SUFFIX = "API"
PROD_ENVIRONMENT = "prod"

# File patterns
ARCHIVE_FILE_PATTERN = "{app}.{version}.zip"
ARCHIVE_GLOB = "*.zip"
VERSION_FILE = "version.txt"
WEB_CONFIG_FILE = "Web.config"
WEB_CONFIG_TRANSFORM_PATTERN = "Web.{env}.config"
WEB_CONFIG_OUTPUT_FILE = "Web.transformed.config"
ASSEMBLY_INFO_FILE = "AssemblyInfo.cs"

# Default configuration values
DEFAULT_RETENTION_COUNT = 3
DEFAULT_POLL_INTERVAL = 1.0  # seconds
DEFAULT_POLL_ATTEMPTS = 30
DEFAULT_POOL_BACKEND = "powershell"
DEFAULT_SOURCE_TYPE = "github"
DEFAULT_TOKEN_ENV = "GH_TOKEN"
DEFAULT_TRANSFORM_COMMAND = "ctt.exe s:{source} t:{transform} d:{output} i"
BUILD_NUMBER_OFFSET = 1000
DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1MB

# Parameter names as they appear in the JSON params document
REQUIRED_PARAMS = ["app_name", "web_name", "env_name", "ver_number", "dir_name", "app_pool"]
API_PARAM = "api_name"
NAME_PARAMS = ["app_name", "web_name", "env_name", "dir_name", "app_pool"]


class SourceType(Enum):
    FILESYSTEM = "filesystem"
    GITHUB = "github"


class PoolBackendType(Enum):
    POWERSHELL = "powershell"
    APPCMD = "appcmd"


# Error codes
class ErrorCode:
    CONFIG_FORMAT_ERROR = "DT001"
    SOURCE_NOT_FOUND = "DT002"
    VERSION_FORMAT_ERROR = "DT003"
    STORAGE_FAILED = "DT004"
    PERMISSION_DENIED = "DT005"
    VALIDATION_FAILED = "DT007"
    MISSING_REQUIRED_PARAMETER = "DT009"
    ARTIFACT_NOT_FOUND = "DT010"
    PACK_FAILED = "DT020"
    EXTRACTION_FAILED = "DT022"
    BACKUP_COPY_FAILED = "DT023"
    POOL_COMMAND_FAILED = "DT024"
    SWAP_FAILED = "DT025"
    UNEXPECTED_ERROR = "DT099"

    # Non-fatal conditions recorded as warnings
    BACKUP_PRUNE_FAILED = "W101"
    POOL_TIMEOUT = "W102"
    POOL_NOT_FOUND = "W103"
    API_SOURCE_MISSING = "W104"
    TRANSFORM_SKIPPED = "W105"
    CLEANUP_FAILED = "W106"
    POOL_STATE_UNKNOWN = "W107"
    POOL_NOT_STARTED = "W108"


# Environment variables
ENV_CONFIG_PATH = "IIS_DEPLOY_CONFIG"
ENV_LOG_LEVEL = "IIS_DEPLOY_LOG_LEVEL"
ENV_WWWROOT = "IIS_DEPLOY_WWWROOT"

# Validation patterns
BUILD_VERSION_PATTERN = re.compile(r"^v?\d{2}\.\d{2}\.\d{2}\.\d{4}$")
PATH_SEGMENT_PATTERN = re.compile(r"^(?!\.{1,2}$)[^\\/:*?\"<>|]+$")
ASSEMBLY_VERSION_PATTERN = re.compile(r'AssemblyVersion\(".*?"\)')
ASSEMBLY_FILE_VERSION_PATTERN = re.compile(r'AssemblyFileVersion\(".*?"\)')

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_INFO = "ℹ"
EMOJI_ARROW = "→"
EMOJI_PACKAGE = "📦"
EMOJI_ROCKET = "🚀"
EMOJI_FOLDER = "📁"
EMOJI_CLOUD = "☁️"
EMOJI_SERVER = "🖥️"

# Messages templates
MSG_STAGE_SUCCESS = f"{EMOJI_SUCCESS} Release {{version}} staged at {{path}}"
MSG_BACKUP_SUCCESS = f"{EMOJI_SUCCESS} Backup created: {{path}}"
MSG_BACKUP_SKIPPED = f"{EMOJI_INFO} No existing deployment found; skipping backup"
MSG_BACKUP_PRUNED = f"{EMOJI_SUCCESS} Old backups cleaned up. Kept the latest {{count}} backups"
MSG_POOL_STOPPED = f"{EMOJI_SUCCESS} {{kind}} application pool {{name}} stopped"
MSG_POOL_STARTED = f"{EMOJI_SUCCESS} {{kind}} application pool {{name}} started"
MSG_POOL_ALREADY_STOPPED = f"{EMOJI_INFO} {{kind}} application pool {{name}} is already stopped"
MSG_POOL_ALREADY_RUNNING = f"{EMOJI_INFO} {{kind}} application pool {{name}} is already running"
MSG_POOL_TIMEOUT = f"{EMOJI_WARNING} Timeout waiting for pool {{name}} to reach {{state}}"
MSG_POOL_NOT_FOUND = f"{EMOJI_WARNING} {{kind}} application pool {{name}} not found"
MSG_POOL_UNKNOWN = f"{EMOJI_WARNING} {{kind}} application pool {{name}} reports an unknown state, skipping"
MSG_POOL_NOT_STARTED = f"{EMOJI_WARNING} {{kind}} application pool {{name}} is {{state}}, not started"
MSG_SWAP_SUCCESS = f"{EMOJI_SUCCESS} {{kind}} files deployed to {{path}}"
MSG_DEPLOY_SUCCESS = f"{EMOJI_SUCCESS} Deployed: {{app}} {{version}} to {{env}}"
MSG_CLEANUP_DONE = f"{EMOJI_SUCCESS} Temporary deployment files cleaned up"

RELEASE_URL_TEMPLATE = "https://github.com/{repository}/releases/tag/{tag}"
RELEASE_TITLE_TEMPLATE = "{app} Package v{version}"
