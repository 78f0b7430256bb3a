# Environment variables
ENV_SIG_KEY = "APPWIRE_SIG_KEY"
ENV_SIG_KEY_VERSION = "APPWIRE_SIG_KEY_VERSION"
ENV_DEBUG = "APPWIRE_DEBUG"

# Headers
HEADER_USER_AGENT = "User-Agent"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_CONTENT_LENGTH = "Content-Length"
HEADER_CAPABILITIES = "X-IG-Capabilities"
HEADER_CONNECTION_TYPE = "X-IG-Connection-Type"
HEADER_CONNECTION_SPEED = "X-IG-Connection-Speed"

# Content types
CONTENT_TYPE_URLENCODED = "application/x-www-form-urlencoded; charset=UTF-8"
CONTENT_TYPE_MULTIPART = "multipart/form-data"
CONTENT_TYPE_OCTET_STREAM = "application/octet-stream"

# Default header values
DEFAULT_CAPABILITIES = "3brTBw=="
DEFAULT_CONNECTION_TYPE = "WIFI"
CONNECTION_SPEED_MIN = 1000
CONNECTION_SPEED_MAX = 3700
DEFAULT_USER_AGENT = (
    "Instagram 10.26.0 Android (23/6.0.1; 640dpi; 1440x2560; "
    "samsung; SM-G935F; hero2lte; samsungexynos8890; en_US)"
)

# API
API_URLS = {
    1: "https://i.instagram.com/api/v1/",
    2: "https://i.instagram.com/api/v2/",
}
DEFAULT_SIG_KEY_VERSION = "4"

# Multipart
BOUNDARY_CHARS = "-_1234567890abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
BOUNDARY_LENGTH = 30

# Album uploads
ALBUM_MIN_ITEMS = 2
ALBUM_MAX_ITEMS = 10
MAX_CONFIGURE_RETRIES = 4
CONFIGURE_RETRY_DELAY = 1.0
