"""Document URL helpers."""

import re

from doc2markdown.exceptions import InvalidDocumentURLError

_DOCX_ID_RE = re.compile(r"docx/([a-zA-Z0-9]+)")


def parse_document_id(url: str) -> str:
    """
    Extract the document id from a Feishu docx URL.

    Args:
        url: e.g. https://example.feishu.cn/docx/G6bldPfBQo7nZ7xM3urcKtCPn5c

    Returns:
        Document id

    Raises:
        InvalidDocumentURLError: If the URL has no ``docx/<id>`` segment
    """
    match = _DOCX_ID_RE.search(url or "")
    if not match:
        raise InvalidDocumentURLError(f"Invalid Feishu document URL: {url!r}")
    return match.group(1)
