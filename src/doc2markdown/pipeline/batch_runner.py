"""
Batch conversion of Feishu documents.

Tasks are processed strictly one after another. A failing document is
counted and skipped; it never stops the batch.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from loguru import logger

from doc2markdown.config import settings
from doc2markdown.exceptions import ConfigurationError
from doc2markdown.feishu.client import FeishuClient
from doc2markdown.feishu.images import ImageStore
from doc2markdown.feishu.urls import parse_document_id
from doc2markdown.pipeline.document_converter import DocumentConverter
from doc2markdown.pipeline.hooks import FinishCallback, ImageHook, ProgressCallback, UrlPredicate, settle
from doc2markdown.schemas.tasks import BatchResult, DocumentTask


@dataclass
class ConversionHooks:
    """Caller callbacks; every hook is optional."""

    should_handle_url: Optional[UrlPredicate] = None
    handle_image: Optional[ImageHook] = None
    handle_progress: Optional[ProgressCallback] = None
    on_doc_finish: Optional[FinishCallback] = None


class BatchRunner:
    """Runs a list of document tasks through a converter."""

    def __init__(self, converter: DocumentConverter, hooks: Optional[ConversionHooks] = None):
        self.converter = converter
        self.hooks = hooks or ConversionHooks()

    def run(self, tasks: Sequence[DocumentTask]) -> BatchResult:
        """
        Convert every task in order.

        Progress is reported once before the first task and once after each
        task, whatever its outcome.

        Args:
            tasks: Documents to convert

        Returns:
            Final counters
        """
        result = BatchResult(total=len(tasks))
        logger.info(f"Starting batch of {result.total} document(s)")
        self._report_progress(result)

        for task in tasks:
            if not self._should_handle(task):
                result.skipped += 1
                logger.info(f"Skipping document {task.id} ({task.url})")
                self._report_progress(result)
                continue

            try:
                markdown = self.converter.convert(task)
            except Exception as e:
                result.errors += 1
                logger.error(f"Failed to convert document {task.id}: {type(e).__name__}: {e}")
                self._report_progress(result)
                continue

            result.done += 1
            self._report_progress(result)
            self._notify_finish(task, markdown)

        logger.info(
            f"Batch finished: {result.done} done, {result.errors} failed, "
            f"{result.skipped} skipped of {result.total}"
        )
        return result

    def _should_handle(self, task: DocumentTask) -> bool:
        predicate = self.hooks.should_handle_url
        if predicate is None:
            return True
        try:
            return bool(settle(predicate(task.url)))
        except Exception as e:
            logger.warning(f"URL predicate failed for {task.url}: {e}")
            return False

    def _report_progress(self, result: BatchResult):
        callback = self.hooks.handle_progress
        if callback is None:
            return
        try:
            callback(result.done, result.errors, result.total)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")

    def _notify_finish(self, task: DocumentTask, markdown: str):
        callback = self.hooks.on_doc_finish
        if callback is None:
            return
        try:
            settle(callback(task.id, markdown, task.metadata))
        except Exception as e:
            logger.warning(f"Completion callback failed for document {task.id}: {e}")


def tasks_from_files(files: Iterable[Dict[str, Any]], file_types: Sequence[str] = ("docx",)) -> List[DocumentTask]:
    """
    Document tasks for the convertible entries of a folder listing.

    Args:
        files: Raw drive file records
        file_types: Drive file types to keep

    Returns:
        One task per kept file, with the file token as document id
    """
    tasks = []
    for item in files:
        if item.get("type") not in file_types:
            logger.debug(f"Ignoring {item.get('type')} file {item.get('name')!r}")
            continue
        tasks.append(DocumentTask(**{**item, "id": item["token"], "url": item.get("url", "")}))
    return tasks


def resolve_tasks(
    client: FeishuClient,
    doc_url: Optional[str] = None,
    folder_token: Optional[str] = None,
    page_size: Optional[int] = None,
    page_count: Optional[int] = None,
) -> List[DocumentTask]:
    """
    Build the task list for a single document URL or a drive folder.

    A document URL wins over a folder token. An unparseable URL raises
    InvalidDocumentURLError before any task runs.

    Returns:
        Document tasks in listing order
    """
    if doc_url:
        document_id = parse_document_id(doc_url)
        metadata = client.get_document_metadata(document_id)
        return [metadata.to_task(url=doc_url)]
    if folder_token:
        files = client.list_folder_files(
            folder_token,
            page_size=page_size or settings.folder_page_size,
            page_count=page_count or settings.folder_page_count,
        )
        return tasks_from_files(files)
    raise ConfigurationError("Feishu doc_url or folder_token is required")


def convert_documents(
    doc_url: Optional[str] = None,
    folder_token: Optional[str] = None,
    hooks: Optional[ConversionHooks] = None,
    client: Optional[FeishuClient] = None,
    image_dir: Optional[Path] = None,
    page_size: Optional[int] = None,
    page_count: Optional[int] = None,
) -> BatchResult:
    """
    Convert a Feishu document or every docx document of a folder.

    Args:
        doc_url: URL of a single docx document
        folder_token: Drive folder to convert
        hooks: Caller callbacks
        client: Feishu client (built from settings when omitted)
        image_dir: Root directory for downloaded images
        page_size: Folder listing page size
        page_count: Maximum folder listing pages

    Returns:
        Final batch counters
    """
    if not doc_url and not folder_token:
        raise ConfigurationError("Feishu doc_url or folder_token is required")
    hooks = hooks or ConversionHooks()
    client = client or FeishuClient.from_settings()

    # Fail fast on bad credentials before listing anything.
    client.get_access_token()
    tasks = resolve_tasks(client, doc_url, folder_token, page_size, page_count)

    image_store = ImageStore(client, image_dir or settings.resolve_image_dir())
    converter = DocumentConverter(
        client,
        image_store=image_store,
        handle_image=hooks.handle_image,
        block_page_size=settings.block_page_size,
    )
    return BatchRunner(converter, hooks).run(tasks)
