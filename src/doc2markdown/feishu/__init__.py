"""Feishu open platform access: client, token cache, rate limiting, images."""

from doc2markdown.feishu.client import FeishuClient
from doc2markdown.feishu.images import ImageStore
from doc2markdown.feishu.rate_limiter import NoOpRateLimiter, TokenBucketRateLimiter
from doc2markdown.feishu.token_cache import AccessToken, AccessTokenCache
from doc2markdown.feishu.urls import parse_document_id

__all__ = [
    "FeishuClient",
    "ImageStore",
    "NoOpRateLimiter",
    "TokenBucketRateLimiter",
    "AccessToken",
    "AccessTokenCache",
    "parse_document_id",
]
