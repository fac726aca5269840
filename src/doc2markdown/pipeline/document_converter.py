"""
Single-document conversion: fetch blocks, build the block map, render.
"""

from typing import Optional

from loguru import logger

from doc2markdown.exceptions import ImageDownloadError
from doc2markdown.feishu.client import FeishuClient
from doc2markdown.feishu.images import ImageStore
from doc2markdown.renderers.block_renderer import BlockTreeRenderer
from doc2markdown.schemas.blocks import BlockMap
from doc2markdown.pipeline.hooks import ImageHook, settle
from doc2markdown.schemas.tasks import DocumentTask


class DocumentConverter:
    """
    Converts one Feishu document into Markdown.

    Images are downloaded through the image store (when given) and the
    resulting local path is passed to the caller's image hook. Image failures
    are logged and the last value computed (token, then local path) is
    embedded instead.
    """

    def __init__(
        self,
        client: FeishuClient,
        image_store: Optional[ImageStore] = None,
        handle_image: Optional[ImageHook] = None,
        block_page_size: int = 500,
    ):
        self.client = client
        self.image_store = image_store
        self.handle_image = handle_image
        self.block_page_size = block_page_size
        self.renderer = BlockTreeRenderer(image_resolver=self.resolve_image)

    def resolve_image(self, document_id: str, token: str) -> str:
        """
        URL to embed for an image token.

        Args:
            document_id: Document containing the image
            token: Media token of the image

        Returns:
            URL from the image hook, else the local path, else the token
        """
        url = token
        if self.image_store is not None:
            try:
                url = str(self.image_store.fetch(document_id, token))
            except ImageDownloadError as e:
                logger.warning(f"{e}; embedding token instead")
                return url

        if self.handle_image is not None:
            try:
                url = settle(self.handle_image(url))
            except Exception as e:
                logger.warning(f"Image hook failed for {url}: {e}")
        return url

    def fetch_block_map(self, document_id: str) -> BlockMap:
        items = self.client.list_document_blocks(document_id, page_size=self.block_page_size)
        return BlockMap.from_items(items)

    def convert(self, task: DocumentTask) -> str:
        """
        Fetch and render one document.

        Args:
            task: Document task; ``task.id`` is the docx document id

        Returns:
            Markdown text of the document
        """
        block_map = self.fetch_block_map(task.id)
        logger.debug(f"Rendering document {task.id} ({len(block_map)} blocks)")
        markdown = self.renderer.render_document(task.id, block_map)
        logger.info(f"Converted document {task.id} {task.name!r}: {len(markdown)} chars")
        return markdown
