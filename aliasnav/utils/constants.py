# Field limits
MAX_URL_LENGTH = 2048
MIN_ALIAS_LENGTH = 1
MAX_ALIAS_LENGTH = 50
MAX_FOLDER_LENGTH = 30
MAX_TAG_LENGTH = 20
MAX_TAGS = 50

# Allowed URL schemes
URL_SCHEMES = frozenset({'http', 'https'})

# Query controller defaults
DEFAULT_DEBOUNCE_MS = 300
DEFAULT_CACHE_SIZE = 50

# Derived views defaults
DEFAULT_TOP_FREQUENT = 10
DEFAULT_RECENT_DAYS = 7

# Identifier generation defaults
DEFAULT_ID_SALT = 'aliasnav'
DEFAULT_ID_LENGTH = 10

# Label used for root shortcuts in folder statistics
ROOT_FOLDER_LABEL = 'ungrouped'

# Supported record store backends
BACKENDS = frozenset({'memory', 'redis'})

# Environment variable names
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
LOG_LEVEL_ENV = 'LOG_LEVEL'
CONFIG_FILE_ENV = 'ALIASNAV_CONFIG_FILE'
