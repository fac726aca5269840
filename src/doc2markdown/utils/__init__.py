"""Utils package exports"""

from doc2markdown.utils.logger import setup_logger
from doc2markdown.utils.file_handler import (
    ensure_directory,
    write_file,
    write_bytes,
    safe_filename,
)

__all__ = [
    "setup_logger",
    "ensure_directory",
    "write_file",
    "write_bytes",
    "safe_filename",
]
