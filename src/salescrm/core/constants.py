"""Application-wide constants.

Shared limits and defaults used across the core layers and the
feature modules.
"""

# Slug generation
MAX_SLUG_LENGTH = 63

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MAX_SHORT_TEXT_LENGTH = 100
MAX_PHONE_LENGTH = 50
MAX_URL_LENGTH = 500
MAX_IPV6_LENGTH = 45
MAX_USER_AGENT_LENGTH = 512
MAX_REQUEST_ID_LENGTH = 64
MAX_ROLE_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 255
MAX_AUDIT_ACTION_LENGTH = 50
MAX_RESOURCE_TYPE_LENGTH = 100

# Password requirements
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128
BCRYPT_ROUNDS = 12

# Pagination defaults
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Global search
SEARCH_RESULTS_PER_ENTITY = 5
MIN_SEARCH_QUERY_LENGTH = 2

# Token settings
DEFAULT_TOKEN_LIFETIME_MINUTES = 60 * 24
ACCESS_TOKEN_JTI_LENGTH = 32
TOKEN_TYPE = "bearer"

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"

# Cache
PERMISSION_CACHE_PREFIX = "salescrm:role-permissions:"
DEFAULT_PERMISSION_CACHE_TTL_SECONDS = 300

# Audit
DEFAULT_AUDIT_DRAIN_TIMEOUT_SECONDS = 5.0
