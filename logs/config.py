"""
Logging settings for the rewriter service.
"""
import os
from pathlib import Path

LOG_DIR = Path(os.getenv("LOG_OUTPUT_DIR", str(Path(__file__).parent / "output")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Rotation for every file handler (default: 10MB x 5 backups)
LOG_ROTATION = {
    "maxBytes": int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024))),
    "backupCount": int(os.getenv("LOG_BACKUP_COUNT", "5")),
}

# Prompt/response previews are cut to this many characters
LOG_PREVIEW_LENGTH = int(os.getenv("LOG_PREVIEW_LENGTH", "200"))

LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(request_id)-36s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(request_id)-36s | %(name)-25s | %(message)s"

# Handler name -> (file name, minimum level)
LOG_FILES = {
    "requests": (os.getenv("LOG_FILE_REQUESTS", "rewriter.log"), None),
    "errors": (os.getenv("LOG_FILE_ERRORS", "rewriter_errors.log"), "WARNING"),
}
