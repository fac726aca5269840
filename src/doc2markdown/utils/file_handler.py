"""
Cross-platform file handling utilities using pathlib.

All file operations use Path objects for cross-platform compatibility.
"""

import re
from pathlib import Path
from loguru import logger

from doc2markdown.exceptions import FileHandlerError


def ensure_directory(path: Path) -> Path:
    """
    Ensure directory exists, create if needed.

    Args:
        path: Directory path

    Returns:
        Path object for the directory
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_file(content: str, file_path: Path, encoding: str = "utf-8"):
    """
    Write text file.

    Args:
        content: Text content to write
        file_path: Path to file
        encoding: Text encoding
    """
    file_path = Path(file_path)
    ensure_directory(file_path.parent)

    try:
        file_path.write_text(content, encoding=encoding)
        logger.debug(f"Wrote file: {file_path}")
    except OSError as e:
        raise FileHandlerError(f"Failed to write {file_path}: {e}") from e


def write_bytes(data: bytes, file_path: Path):
    """Write binary file, creating parent directories."""
    file_path = Path(file_path)
    ensure_directory(file_path.parent)

    try:
        file_path.write_bytes(data)
        logger.debug(f"Wrote {len(data)} bytes: {file_path}")
    except OSError as e:
        raise FileHandlerError(f"Failed to write {file_path}: {e}") from e


def safe_filename(name: str, replacement: str = "_") -> str:
    """
    Create safe filename by replacing invalid characters.

    Args:
        name: Original filename (e.g., a document title)
        replacement: Character to use for replacements

    Returns:
        Safe filename
    """
    safe = re.sub(r'[<>:"/\\|?*\x00-\x1f]', replacement, name)

    # Trim leading/trailing spaces and dots
    safe = safe.strip('. ')

    if not safe:
        safe = "unnamed"

    return safe
