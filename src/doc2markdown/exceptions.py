"""
Custom exception hierarchy for doc2markdown.

All exceptions inherit from Doc2MarkdownError base class.
"""

from typing import Optional


class Doc2MarkdownError(Exception):
    """Base exception for all doc2markdown errors"""
    pass


class ConfigurationError(Doc2MarkdownError):
    """Error in configuration (missing credentials, conflicting options)"""
    pass


class InvalidDocumentURLError(Doc2MarkdownError):
    """Document URL does not contain a recognizable document id"""
    pass


class FeishuAPIError(Doc2MarkdownError):
    """Feishu open platform returned a non-zero business code"""

    def __init__(self, message: str, code: Optional[int] = None, msg: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.msg = msg


class AuthenticationError(FeishuAPIError):
    """Failed to obtain a tenant access token"""
    pass


class ImageDownloadError(Doc2MarkdownError):
    """Error while downloading an embedded image"""
    pass


class BlockTreeError(Doc2MarkdownError):
    """Block list cannot be assembled into a renderable tree"""
    pass


class FileHandlerError(Doc2MarkdownError):
    """Error during file operations"""
    pass
