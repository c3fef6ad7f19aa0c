"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    RESOLUTION_ERROR = 1
    USAGE_ERROR = 2
    CONNECTION_ERROR = 3


class RegistryType(Enum):
    """Naming dialects / downstream ecosystems understood by the program.

    Args:
        Enum (string): Registry type tags.
    """

    GO = "go"
    NPM = "npm"
    MAVEN = "maven"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    DEFAULT_REMOTE = "buf.build"
    DEFAULT_LABEL = "main"
    ENV_BUF_TOKEN = "BUF_TOKEN"
    ENV_LOG_LEVEL = "REMOTEVER_LOG_LEVEL"
    ENV_DEBUG = "DEBUG"

    # Package naming dialects
    NPM_SCOPES = ["@buf/", "@bufteam/"]
    NPM_SCOPED_PATTERN = r"^@[\w-]+/[a-z0-9_-]+\.[a-z0-9_-]+$"
    GO_PATH_MARKER = "/gen/go/"
    GO_MIN_SEGMENTS = 7
    MAVEN_GROUP_ID = "build.buf.gen"

    # Synthetic version composition
    SHORT_COMMIT_LENGTH = 12
    TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
    ZERO_TIMESTAMP = "00000000000000"
    DRAFT_ZERO_TIMESTAMP_REGISTRIES = [RegistryType.NPM, RegistryType.MAVEN]
    VERSION_PREFIX = "v"
    LATEST = "latest"

    # Remote service
    SUPPORTED_REGISTRIES = [RegistryType.GO, RegistryType.NPM, RegistryType.MAVEN]
    PAGE_SIZE = 250
    MAX_WORKERS = 16
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    CONNECT_PROTOCOL_VERSION = "1"

    LABEL_SERVICE = "buf.registry.module.v1.LabelService"
    COMMIT_SERVICE = "buf.registry.module.v1.CommitService"
    PLUGIN_CURATION_SERVICE = "buf.alpha.registry.v1alpha1.PluginCurationService"
