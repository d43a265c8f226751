"""Configuration constants for Instagram Archive Mapper."""

import logging
from pathlib import Path

import psutil
import pytz

# Directory configuration
INPUT_DIR = Path("input")
DB_PATH = Path("user_data.db")
EXPORT_PATH = Path("output") / "connection_stats.json"

# Archive layout (relative to the archive root)
ACTIVITY_DIR_NAME = "your_instagram_activity"
MEDIA_DIR_NAME = "media"
INBOX_SUBPATH = Path("messages") / "inbox"

# Record store
CONTACTS_IDENTIFIER = "all_contacts"

# Logging configuration
DEFAULT_LOG_LEVEL = logging.INFO
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

# Processing configuration
DEFAULT_MAX_WORKERS = min(8, psutil.cpu_count(logical=True) or 1)
DEFAULT_ENCODING = 'utf-8'
ACTIVITY_PAGE_SIZE = 50

# Display timezone for dates and monthly buckets
DISPLAY_TZ = pytz.utc

# Media buckets and file extensions
MEDIA_BUCKETS = ('posts', 'stories', 'reels', 'other')
SUPPORTED_VIDEO_FORMATS = {'.mp4', '.mov'}
SUPPORTED_IMAGE_FORMATS = {'.jpg', '.jpeg', '.png', '.webp', '.heic'}
SUPPORTED_MEDIA_FORMATS = SUPPORTED_VIDEO_FORMATS | SUPPORTED_IMAGE_FORMATS

CONTENT_TYPES = {
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.webp': 'image/webp',
    '.mp4': 'video/mp4',
    '.mov': 'video/quicktime',
}
DEFAULT_CONTENT_TYPE = 'application/octet-stream'
