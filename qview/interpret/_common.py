UNKNOWN_INDEX = -1
DEFAULT_QUEUE_MARKER = "*"
HOST_SEPARATOR = "@"
DOMAIN_SEPARATOR = "."
LOAD_SEPARATOR = "/"
