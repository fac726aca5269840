"""
CLI command for converting Feishu documents to Markdown files.

Converts a single document URL or every docx document of a drive folder and
writes one ``.md`` file per document into the output directory.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Set

import click
import requests
from loguru import logger
from tqdm import tqdm

from ...config import settings
from ...exceptions import Doc2MarkdownError
from ...feishu.client import FeishuClient
from ...pipeline.batch_runner import ConversionHooks, convert_documents
from ...utils.file_handler import safe_filename, write_file
from ...utils.logger import setup_logger


def markdown_path(output_dir: Path, document_id: str, name: str, taken: Set[Path]) -> Path:
    """
    Output file for a document, unique within one run.

    Documents are saved as ``<safe title>.md``; a title already used in this
    run gets the document id appended.
    """
    stem = safe_filename(name or document_id)
    path = output_dir / f"{stem}.md"
    if path in taken:
        path = output_dir / f"{stem}_{safe_filename(document_id)}.md"
    taken.add(path)
    return path


def relative_image_url(image_path: str, output_dir: Path) -> str:
    """Image path as referenced from a Markdown file in ``output_dir``."""
    try:
        relative = os.path.relpath(image_path, output_dir)
    except ValueError:
        # Different drive on Windows
        return Path(image_path).as_posix()
    return Path(relative).as_posix()


@click.command(name="convert")
@click.option("--url", "doc_url", help="URL of a single Feishu docx document")
@click.option("--folder", "folder_token", help="Token of a drive folder to convert")
@click.option("--app-id", help="Feishu app id (defaults to FEISHU_APP_ID)")
@click.option("--app-secret", help="Feishu app secret (defaults to FEISHU_APP_SECRET)")
@click.option("--output-dir", type=click.Path(file_okay=False), help="Directory for Markdown files")
@click.option("--image-dir", type=click.Path(file_okay=False), help="Directory for downloaded images (defaults to output dir)")
@click.option("--page-size", type=int, help="Folder listing page size")
@click.option("--page-count", type=int, help="Maximum folder listing pages")
@click.option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")
def convert_command(doc_url: Optional[str], folder_token: Optional[str], app_id: Optional[str],
                    app_secret: Optional[str], output_dir: Optional[str], image_dir: Optional[str],
                    page_size: Optional[int], page_count: Optional[int], log_level: Optional[str]):
    """
    Convert Feishu documents to Markdown.

    Provide exactly one of --url or --folder. Credentials not given on the
    command line are read from the environment or .env file.
    """
    setup_logger(level=log_level)

    if bool(doc_url) == bool(folder_token):
        logger.error("Provide exactly one of --url or --folder")
        sys.exit(1)

    if not (app_id and app_secret) and not settings.has_credentials:
        logger.error("Feishu credentials missing: pass --app-id/--app-secret or set FEISHU_APP_ID/FEISHU_APP_SECRET")
        sys.exit(1)

    output_path = Path(output_dir) if output_dir else settings.output_dir
    image_root = Path(image_dir) if image_dir else (settings.image_dir or output_path)

    written = []
    write_failures = []
    taken_paths: Set[Path] = set()

    def handle_image(image_path: str) -> str:
        return relative_image_url(image_path, output_path)

    def on_doc_finish(document_id: str, markdown: str, metadata: Dict[str, Any]):
        markdown_file = markdown_path(output_path, document_id, metadata.get("name", ""), taken_paths)
        try:
            write_file(markdown, markdown_file)
        except Doc2MarkdownError as e:
            logger.error(f"Could not save document {document_id}: {e}")
            write_failures.append(document_id)
            return
        written.append(markdown_file)
        logger.info(f"Saved {markdown_file}")

    with tqdm(desc="Converting documents", unit="doc") as pbar:

        def handle_progress(done: int, errors: int, total: int):
            pbar.total = total
            pbar.n = done + errors
            pbar.set_postfix(done=done, errors=errors)
            pbar.refresh()

        hooks = ConversionHooks(
            handle_image=handle_image,
            handle_progress=handle_progress,
            on_doc_finish=on_doc_finish,
        )

        try:
            client = FeishuClient.from_settings(app_id=app_id, app_secret=app_secret)
            result = convert_documents(
                doc_url=doc_url,
                folder_token=folder_token,
                hooks=hooks,
                client=client,
                image_dir=image_root,
                page_size=page_size,
                page_count=page_count,
            )
        except (Doc2MarkdownError, requests.RequestException) as e:
            logger.error(f"Conversion failed: {e}")
            sys.exit(1)

    click.echo(
        f"Converted {result.done}/{result.total} document(s) "
        f"({result.errors} failed, {result.skipped} skipped) into {output_path}"
    )
    for markdown_file in written:
        click.echo(f"  {markdown_file}")

    if result.errors or write_failures:
        sys.exit(1)
