"""Constants for Spider Boxes"""

# ==================== File Paths ====================
DATA_DIR_DEFAULT = "data"
DATABASE_PATH = "data/spider_boxes.db"
LOG_FILE_DEFAULT = "data/spider_boxes.log"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# ==================== Instance Validation ====================
INSTANCE_ID_PATTERN = r"^[A-Za-z0-9_-]+$"
DEFAULT_CONTEXT = "default"

# Fields every instance must carry, per namespace.
REQUIRED_INSTANCE_FIELDS = {
    "field": ("id", "type", "title"),
    "component": ("id", "type", "title"),
    "section": ("id", "type", "title"),
}

# Required keys for type definitions created through the REST surface.
REQUIRED_TYPE_FIELDS = ("id",)

# ==================== Container Children ====================
CHILD_DEFAULTS = {
    "pane": {"collapsed": False},
    "tab": {"active": False},
    "column": {"width": "auto"},
}

DEFAULT_CHILD_TITLES = {
    "pane": "Pane {n}",
    "tab": "Tab {n}",
    "column": "Column {n}",
}

# ==================== Renderer ====================
RANGE_DEFAULT_MIN = 0
RANGE_DEFAULT_MAX = 100
RANGE_DEFAULT_STEP = 1
TEXTAREA_DEFAULT_ROWS = 4
MEDIA_TIMEOUT_DEFAULT = 10  # seconds

# ==================== Hook Names ====================
# Actions
ACTION_TYPE_REGISTERED = "{namespace}_type_registered"
ACTION_REGISTER_TYPES = "register_{namespace}_types"
ACTION_INSTANCE_CREATED = "{namespace}_created"
ACTION_INSTANCE_UPDATED = "{namespace}_updated"
ACTION_INSTANCE_REMOVED = "{namespace}_removed"
ACTION_CHILD_ADDED = "{namespace}_child_added"
ACTION_CHILD_REMOVED = "{namespace}_child_removed"

# Filters
FILTER_GET_TYPES = "get_{namespace}_types"
FILTER_GET_INSTANCES = "get_{namespace}s"
FILTER_CONFIG_FIELDS = "config_fields"
FILTER_CONFIG_FIELDS_FOR_TYPE = "config_fields_{type}"
FILTER_TYPE_CONFIG_RESPONSE = "rest_{namespace}_type_config"
FILTER_BEFORE_RENDER = "before_render_field"
FILTER_AFTER_RENDER = "after_render_field"

# ==================== Database Configuration ====================
DB_MAX_CONNECTIONS = 20
DB_STALE_TIMEOUT = 300  # 5 minutes
DB_PRAGMAS = {
    "journal_mode": "wal",
    "synchronous": "NORMAL",
    "busy_timeout": 5000,
    "foreign_keys": 1,
    "cache_size": -64 * 1000,  # 64MB
}
