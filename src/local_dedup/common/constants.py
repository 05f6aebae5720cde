"""Constants used throughout the application."""

APP_NAME = "local-dedup"

# Streaming read size for hashing
DEFAULT_CHUNK_SIZE = 1024 * 1024

# Number of lock-protected shards in the grouping store
STORE_SHARDS = 64
