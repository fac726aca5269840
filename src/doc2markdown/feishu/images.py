"""
Local storage for images embedded in documents.

Images are saved as ``<root>/<document_id>_images/<token>.jpg``; a file that
already exists is reused without downloading again.
"""

from pathlib import Path

import requests
from loguru import logger

from doc2markdown.exceptions import FeishuAPIError, ImageDownloadError
from doc2markdown.feishu.client import FeishuClient
from doc2markdown.utils.file_handler import ensure_directory, write_bytes


class ImageStore:
    """Downloads document images into a per-document directory."""

    def __init__(self, client: FeishuClient, root_dir: Path, extension: str = ".jpg"):
        """
        Initialize image store.

        Args:
            client: Client used to download media
            root_dir: Directory holding the per-document image folders
            extension: File extension of saved images
        """
        self.client = client
        self.root_dir = Path(root_dir)
        self.extension = extension

    def image_dir(self, document_id: str) -> Path:
        return self.root_dir / f"{document_id}_images"

    def image_path(self, document_id: str, token: str) -> Path:
        return self.image_dir(document_id) / f"{token}{self.extension}"

    def fetch(self, document_id: str, token: str) -> Path:
        """
        Local path of an image, downloading it if not stored yet.

        Args:
            document_id: Document the image belongs to
            token: Media token of the image

        Returns:
            Path of the stored image

        Raises:
            ImageDownloadError: If the download fails
        """
        ensure_directory(self.image_dir(document_id))
        path = self.image_path(document_id, token)
        if path.exists():
            logger.debug(f"Image {token} already stored at {path}")
            return path

        try:
            data = self.client.download_media(token)
        except (FeishuAPIError, requests.RequestException) as e:
            raise ImageDownloadError(f"Failed to download image {token}: {e}") from e

        write_bytes(data, path)
        logger.debug(f"Stored image {token} ({len(data)} bytes) at {path}")
        return path
