"""Pipeline package exports"""

from doc2markdown.pipeline.batch_runner import (
    BatchRunner,
    ConversionHooks,
    convert_documents,
    resolve_tasks,
    tasks_from_files,
)
from doc2markdown.pipeline.document_converter import DocumentConverter
from doc2markdown.pipeline.hooks import settle

__all__ = [
    "BatchRunner",
    "ConversionHooks",
    "convert_documents",
    "resolve_tasks",
    "tasks_from_files",
    "DocumentConverter",
    "settle",
]
