"""Configuration settings for the file store server."""
import os

# Storage location
STORAGE_DIR = os.getenv("FILE_STORE_DIR", "/store")

# Network
HOST = os.getenv("FILE_STORE_HOST", "0.0.0.0")
PORT = int(os.getenv("FILE_STORE_PORT", "3030"))

# Upload limits
MAX_LENGTH = 100 * 1024 * 1024  # 100MB

# Logging
LOG_DIR = os.getenv("FILE_STORE_LOG_DIR", "logs")
LOG_LEVEL = os.getenv("FILE_STORE_LOG_LEVEL", "INFO")
