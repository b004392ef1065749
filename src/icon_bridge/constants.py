"""Application-wide constants for icon-bridge.

Grouped by concern so that modules import only what they need. Values that
are shared with the UI peer (message types, storage key) must stay stable.
"""

from typing import Final

# =============================================================================
# Providers
# =============================================================================

PROVIDER_GITHUB: Final = "github"
PROVIDER_AZURE: Final = "azure"

# Order matters: the first connected provider wins during reconciliation.
PROVIDER_KINDS: Final = (PROVIDER_AZURE, PROVIDER_GITHUB)
PROVIDER_LABELS: Final = {PROVIDER_GITHUB: "GitHub", PROVIDER_AZURE: "Azure"}

DEFAULT_BRANCH: Final = "main"

# =============================================================================
# Persistence
# =============================================================================

STORAGE_KEY: Final = "planet-icon-config-v1"
CONFIG_DIR_NAME: Final = "icon-bridge"
DEFAULT_CONFIG_SUBDIR: Final = ".config"
SETTINGS_FILE_NAME: Final = "settings.conf"
STORE_FILE_NAME: Final = "client-storage.json"
KEYRING_SERVICE_TEMPLATE: Final = "icon-bridge-{provider}-pat"
KEYRING_USERNAME: Final = "pat"

# =============================================================================
# Remote APIs
# =============================================================================

GITHUB_API_BASE: Final = "https://api.github.com"
GITHUB_API_VERSION: Final = "2022-11-28"
AZURE_API_BASE: Final = "https://dev.azure.com"
AZURE_API_VERSION: Final = "7.1"

GITHUB_METADATA_CANDIDATES: Final = (
    "Icons.json",
    "icons.json",
    "Icons/Icons.json",
    "icons/icons.json",
)
AZURE_METADATA_CANDIDATES: Final = tuple(
    f"/{path}" for path in GITHUB_METADATA_CANDIDATES
)

# =============================================================================
# Icons
# =============================================================================

VARIANT_OUTLINE: Final = "outline"
VARIANT_FILL: Final = "fill"
VARIANT_BULK: Final = "bulk"
ICON_VARIANTS: Final = (VARIANT_OUTLINE, VARIANT_FILL, VARIANT_BULK)

DEFAULT_ICON_LABEL: Final = "Icon"

# RGB in the 0..1 range used by the host paint model
ICON_TINT_COLOR: Final = {"r": 0.09, "g": 0.11, "b": 0.16}

# Minimum pixel difference that forces a node replacement
SIZE_CHANGE_THRESHOLD: Final = 1

# Properties carried over from a replaced node
PRESERVED_NODE_PROPERTIES: Final = (
    "visible",
    "locked",
    "opacity",
    "blend_mode",
    "rotation",
    "layout_align",
    "layout_grow",
    "layout_positioning",
    "constraints",
)

# Per-node metadata keys, namespaced on the host node
NODE_DATA_NAMESPACE: Final = "icon-bridge"
NODE_KEY_MANAGED: Final = "managed"
NODE_KEY_PROVIDER: Final = "provider"
NODE_KEY_ICON_ID: Final = "iconId"
NODE_KEY_PATH: Final = "path"
NODE_KEY_BASE_NAME: Final = "baseName"
NODE_KEY_VARIANT: Final = "variant"
NODE_KEY_SIZE: Final = "size"

# =============================================================================
# Previews
# =============================================================================

PREVIEW_MAX_WORKERS: Final = 8
PREVIEW_MAX_REQUESTED: Final = 24

# =============================================================================
# UI
# =============================================================================

UI_WIDTH: Final = 380
UI_HEIGHT: Final = 664

EVENT_STATE_HYDRATE: Final = "state-hydrate"
EVENT_FETCH_START: Final = "remote-fetch-start"
EVENT_FETCH_SUCCESS: Final = "remote-fetch-success"
EVENT_FETCH_FAILED: Final = "remote-fetch-failed"
EVENT_ICON_PREVIEW: Final = "icon-preview"
EVENT_ICON_PREVIEW_FAILED: Final = "icon-preview-failed"
EVENT_PREVIEWS_COMPLETE: Final = "icon-previews-complete"

CONTEXT_STARTUP: Final = "startup"
CONTEXT_SAVE_PROVIDER: Final = "save-provider"
CONTEXT_SELECT_PROVIDER: Final = "select-provider"
CONTEXT_RETRY_SYNC: Final = "retry-sync"

MSG_UI_READY: Final = "ui-ready"
MSG_SAVE_PROVIDER: Final = "save-provider"
MSG_SELECT_PROVIDER: Final = "select-provider"
MSG_RETRY_SYNC: Final = "retry-sync"
MSG_INSERT_ICON: Final = "insert-icon"
MSG_APPLY_VARIANT_SIZE: Final = "apply-variant-size"
MSG_REQUEST_PREVIEWS: Final = "request-previews"
MSG_RESIZE_UI: Final = "resize-ui"
MSG_CLOSE_PLUGIN: Final = "close-plugin"

NOTICE_PREFIX: Final = "Icon bridge error"

# =============================================================================
# Settings (INI)
# =============================================================================

SETTINGS_VERSION: Final = "1.0.0"
SECTION_DEFAULT: Final = "DEFAULT"
SECTION_NETWORK: Final = "network"
SECTION_DIRECTORY: Final = "directory"
KEY_CONFIG_VERSION: Final = "config_version"
KEY_LOG_LEVEL: Final = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final = "console_log_level"
DEFAULT_TIMEOUT_SECONDS: Final = 0

# =============================================================================
# Logging
# =============================================================================

DEFAULT_LOG_LEVEL: Final = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final = "WARNING"
LOG_FILE_NAME: Final = "icon-bridge.log"
LOG_ROTATION_THRESHOLD_BYTES: Final = 5 * 1024 * 1024
LOG_BACKUP_COUNT: Final = 3
LOG_CONSOLE_FORMAT: Final = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_CONSOLE_DATE_FORMAT: Final = "%H:%M:%S"
LOG_FILE_FORMAT: Final = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(funcName)s:%(lineno)d] - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final = "%Y-%m-%d %H:%M:%S"
LOG_COLORS: Final = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
    "RESET": "\033[0m",
}
