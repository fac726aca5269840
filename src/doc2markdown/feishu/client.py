"""Feishu open platform client for docx blocks, drive listings and media."""

import time
from typing import Any, Dict, List, Optional, Union

import requests
import tenacity
from loguru import logger

from doc2markdown.config import Settings, settings as default_settings
from doc2markdown.exceptions import AuthenticationError, ConfigurationError, FeishuAPIError
from doc2markdown.feishu.rate_limiter import NoOpRateLimiter, TokenBucketRateLimiter
from doc2markdown.feishu.token_cache import AccessToken, AccessTokenCache
from doc2markdown.schemas.tasks import DocumentMetadata

TOKEN_PATH = "/open-apis/auth/v3/tenant_access_token/internal"
DOCUMENT_PATH = "/open-apis/docx/v1/documents/{document_id}"
BLOCKS_PATH = "/open-apis/docx/v1/documents/{document_id}/blocks"
FILES_PATH = "/open-apis/drive/v1/files"
MEDIA_DOWNLOAD_PATH = "/open-apis/drive/v1/medias/{file_token}/download"

_RETRYABLE_STATUS = {408, 429, 500, 502, 503, 504}
# Business codes meaning the tenant access token is missing, invalid or expired
_TOKEN_REJECTED_CODES = {99991661, 99991663, 99991668, 99991671}

RateLimiter = Union[TokenBucketRateLimiter, NoOpRateLimiter]


def log_retry_attempt(retry_state: tenacity.RetryCallState) -> None:
    """Log retry attempts with context."""
    attempt = retry_state.attempt_number
    if retry_state.outcome and retry_state.outcome.failed:
        exception = retry_state.outcome.exception()
        logger.warning(
            f"Feishu retry attempt {attempt}: {type(exception).__name__}: {exception}"
        )
    else:
        logger.info(f"Feishu retry attempt {attempt}")


def is_retryable(exc: BaseException) -> bool:
    """Connection problems, timeouts and throttling/server errors are retried."""
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        return exc.response.status_code in _RETRYABLE_STATUS
    return False


class FeishuClient:
    """Thin client over the Feishu open platform REST API.

    Owns the tenant access token cache, so every document fetched through
    one client shares a token until it expires. Transport errors are retried
    with exponential backoff; a non-zero business ``code`` raises
    FeishuAPIError immediately.
    """

    def __init__(
        self,
        app_id: str,
        app_secret: str,
        base_url: str = "https://open.feishu.cn",
        timeout: int = 30,
        max_retries: int = 3,
        retry_min_wait: float = 1.0,
        retry_max_wait: float = 30.0,
        token_refresh_margin: float = 3.0,
        rate_limiter: Optional[RateLimiter] = None,
        token_cache: Optional[AccessTokenCache] = None,
    ):
        """Initialize client.

        Args:
            app_id: Feishu app id
            app_secret: Feishu app secret
            base_url: Open platform base URL
            timeout: Request timeout in seconds
            max_retries: Maximum attempts per request
            retry_min_wait: Initial wait between retries (seconds)
            retry_max_wait: Maximum wait between retries (seconds)
            token_refresh_margin: Seconds subtracted from the token lifetime
            rate_limiter: Limiter acquired before every request
            token_cache: Cache for the tenant access token
        """
        if not app_id or not app_secret:
            raise ConfigurationError("Feishu app_id and app_secret are required")
        self.app_id = app_id
        self.app_secret = app_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_min_wait = retry_min_wait
        self.retry_max_wait = retry_max_wait
        self.token_refresh_margin = token_refresh_margin
        self.rate_limiter = rate_limiter or NoOpRateLimiter()
        self.token_cache = token_cache or AccessTokenCache()

        self._setup_retry()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides) -> "FeishuClient":
        """Build a client from application settings; keyword overrides win."""
        settings = settings or default_settings
        options = dict(
            app_id=settings.feishu_app_id,
            app_secret=settings.feishu_app_secret,
            base_url=settings.feishu_base_url,
            timeout=settings.request_timeout,
            max_retries=settings.max_retries,
            retry_min_wait=settings.retry_min_wait,
            retry_max_wait=settings.retry_max_wait,
            token_refresh_margin=settings.token_refresh_margin,
            rate_limiter=(
                TokenBucketRateLimiter(settings.rate_limit) if settings.rate_limit > 0 else NoOpRateLimiter()
            ),
        )
        options.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**options)

    def _setup_retry(self):
        """Configure tenacity retry decorator."""
        self._retry_decorator = tenacity.retry(
            wait=tenacity.wait_exponential(
                multiplier=self.retry_min_wait,
                max=self.retry_max_wait,
            ),
            stop=tenacity.stop_after_attempt(self.max_retries),
            retry=tenacity.retry_if_exception(is_retryable),
            before_sleep=log_retry_attempt,
            reraise=True
        )

    # ------------------------------------------------------------------ transport

    def _headers(self, authenticated: bool) -> Dict[str, str]:
        headers = {"Content-Type": "application/json; charset=utf-8"}
        if authenticated:
            headers["Authorization"] = f"Bearer {self.get_access_token()}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
    ) -> requests.Response:
        """Send one request with rate limiting and retry."""
        url = f"{self.base_url}{path}"
        headers = self._headers(authenticated)

        @self._retry_decorator
        def _call():
            with self.rate_limiter:
                logger.debug(f"Feishu {method} {path} params={params}")
                response = requests.request(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    json=json,
                    timeout=self.timeout,
                )
                response.raise_for_status()
                return response

        try:
            return _call()
        except requests.HTTPError as e:
            error = self._api_error_from_http(e, path)
            self._check_token_rejected(error.code)
            raise error from e

    def _check_token_rejected(self, code: Optional[int]):
        """Drop the cached token when the platform rejects it."""
        if code in _TOKEN_REJECTED_CODES:
            logger.warning(f"Feishu rejected the access token (code {code}); it will be refreshed")
            self.token_cache.invalidate()

    @staticmethod
    def _api_error_from_http(error: requests.HTTPError, path: str) -> FeishuAPIError:
        code, msg = None, str(error)
        response = error.response
        if response is not None:
            try:
                body = response.json()
                code, msg = body.get("code"), body.get("msg", msg)
            except ValueError:
                pass
        return FeishuAPIError(f"Feishu request {path} failed: {msg}", code=code, msg=msg)

    def _request_json(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """Send a request and return the ``data`` object of the response envelope."""
        payload = self._request(method, path, **kwargs).json()
        code = payload.get("code", 0)
        if code != 0:
            msg = payload.get("msg", "")
            self._check_token_rejected(code)
            raise FeishuAPIError(f"Feishu API {path} returned code {code}: {msg}", code=code, msg=msg)
        return payload.get("data") or {}

    # ------------------------------------------------------------------ auth

    def fetch_access_token(self) -> AccessToken:
        """Request a new tenant access token.

        Returns:
            AccessToken expiring ``token_refresh_margin`` seconds early

        Raises:
            AuthenticationError: If the platform rejects the credentials
        """
        response = self._request(
            "POST",
            TOKEN_PATH,
            json={"app_id": self.app_id, "app_secret": self.app_secret},
            authenticated=False,
        )
        payload = response.json()
        code = payload.get("code", -1)
        if code != 0:
            msg = payload.get("msg", "")
            raise AuthenticationError(f"Failed to get Feishu access token: {msg}", code=code, msg=msg)
        expires_at = time.time() + float(payload.get("expire", 0)) - self.token_refresh_margin
        logger.info("Obtained Feishu tenant access token")
        return AccessToken(token=payload["tenant_access_token"], expires_at=expires_at)

    def get_access_token(self) -> str:
        """Cached tenant access token, refreshed when expired."""
        return self.token_cache.get_or_refresh(self.fetch_access_token)

    # ------------------------------------------------------------------ docx

    def get_document_metadata(self, document_id: str) -> DocumentMetadata:
        """Fetch title and revision of a docx document."""
        data = self._request_json("GET", DOCUMENT_PATH.format(document_id=document_id))
        document = data.get("document") or {}
        return DocumentMetadata(
            id=document.get("document_id", document_id),
            token=document.get("document_id", document_id),
            name=document.get("title", ""),
            url=document.get("url", ""),
            revision_id=document.get("revision_id"),
        )

    def list_document_blocks(self, document_id: str, page_size: int = 500) -> List[Dict[str, Any]]:
        """Fetch every block of a document, following pagination.

        Args:
            document_id: Document id
            page_size: Blocks per page (API maximum 500)

        Returns:
            Raw block records in API order
        """
        items: List[Dict[str, Any]] = []
        page_token: Optional[str] = None
        while True:
            params: Dict[str, Any] = {"page_size": page_size, "document_revision_id": -1}
            if page_token:
                params["page_token"] = page_token
            data = self._request_json("GET", BLOCKS_PATH.format(document_id=document_id), params=params)
            items.extend(data.get("items") or [])
            page_token = data.get("page_token")
            if not data.get("has_more") or not page_token:
                break
        logger.debug(f"Fetched {len(items)} blocks for document {document_id}")
        return items

    # ------------------------------------------------------------------ drive

    def list_folder_files(self, folder_token: str, page_size: int = 200, page_count: int = 3) -> List[Dict[str, Any]]:
        """List files of a drive folder.

        Args:
            folder_token: Folder token
            page_size: Files per page
            page_count: Maximum number of pages to fetch

        Returns:
            Raw file records
        """
        files: List[Dict[str, Any]] = []
        next_page_token: Optional[str] = None
        for _ in range(page_count):
            params: Dict[str, Any] = {"folder_token": folder_token, "page_size": page_size}
            if next_page_token:
                params["page_token"] = next_page_token
            data = self._request_json("GET", FILES_PATH, params=params)
            files.extend(data.get("files") or [])
            next_page_token = data.get("next_page_token")
            if not data.get("has_more"):
                break
        else:
            if next_page_token:
                logger.warning(
                    f"Folder {folder_token} has more files than {page_count} page(s) of {page_size}"
                )
        logger.info(f"Listed {len(files)} files in folder {folder_token}")
        return files

    def download_media(self, file_token: str) -> bytes:
        """Download the bytes of a drive media resource (e.g., an embedded image)."""
        response = self._request("GET", MEDIA_DOWNLOAD_PATH.format(file_token=file_token))
        return response.content
