"""
Tests for single-document conversion.
"""

import pytest
from unittest.mock import Mock

from doc2markdown.exceptions import ImageDownloadError
from doc2markdown.pipeline.document_converter import DocumentConverter
from doc2markdown.schemas.tasks import DocumentTask


@pytest.fixture
def mock_client(sample_document_items):
    client = Mock()
    client.list_document_blocks.return_value = sample_document_items
    return client


@pytest.fixture
def mock_image_store(tmp_path):
    store = Mock()
    store.fetch.side_effect = lambda document_id, token: tmp_path / f"{document_id}_images" / f"{token}.jpg"
    return store


class TestDocumentConverter:
    """Tests for DocumentConverter."""

    def test_convert_without_images(self, mock_client, sample_markdown):
        """Test conversion embeds raw tokens without an image store."""
        converter = DocumentConverter(mock_client, block_page_size=100)

        markdown = converter.convert(DocumentTask(id="doc1", name="Sample"))

        assert markdown == sample_markdown
        mock_client.list_document_blocks.assert_called_once_with("doc1", page_size=100)

    def test_image_hook_receives_local_path(self, mock_client, mock_image_store, tmp_path):
        """Test the hook maps the stored path to the embedded URL."""
        seen = []

        def handle_image(path):
            seen.append(path)
            return "https://cdn.example.com/imgtok.jpg"

        converter = DocumentConverter(mock_client, mock_image_store, handle_image)
        markdown = converter.convert(DocumentTask(id="doc1"))

        assert seen == [str(tmp_path / "doc1_images" / "imgtok.jpg")]
        assert "![image](https://cdn.example.com/imgtok.jpg)" in markdown

    def test_local_path_without_hook(self, mock_client, mock_image_store, tmp_path):
        """Test the local path is embedded when no hook is given."""
        converter = DocumentConverter(mock_client, mock_image_store)

        assert converter.resolve_image("doc1", "imgtok") == str(tmp_path / "doc1_images" / "imgtok.jpg")

    def test_download_failure_embeds_token(self, mock_client, mock_image_store):
        """Test a failed download falls back to the token and skips the hook."""
        mock_image_store.fetch.side_effect = ImageDownloadError("boom")
        hook = Mock()
        converter = DocumentConverter(mock_client, mock_image_store, hook)

        assert converter.resolve_image("doc1", "imgtok") == "imgtok"
        hook.assert_not_called()

    def test_hook_failure_embeds_local_path(self, mock_client, mock_image_store, tmp_path):
        """Test a failing hook falls back to the local path."""
        converter = DocumentConverter(mock_client, mock_image_store, Mock(side_effect=RuntimeError("upload failed")))

        assert converter.resolve_image("doc1", "imgtok") == str(tmp_path / "doc1_images" / "imgtok.jpg")

    def test_storage_error_propagates(self, mock_client, mock_image_store):
        """Test storage failures fail the document."""
        mock_image_store.fetch.side_effect = PermissionError("read-only")
        converter = DocumentConverter(mock_client, mock_image_store)

        with pytest.raises(PermissionError):
            converter.convert(DocumentTask(id="doc1"))

    def test_async_image_hook_awaited(self, mock_client, mock_image_store):
        """Test a coroutine image hook is awaited before embedding."""
        async def handle_image(path):
            return "https://cdn.example.com/async.jpg"

        converter = DocumentConverter(mock_client, mock_image_store, handle_image)
        markdown = converter.convert(DocumentTask(id="doc1"))

        assert "![image](https://cdn.example.com/async.jpg)" in markdown
        assert "coroutine" not in markdown
