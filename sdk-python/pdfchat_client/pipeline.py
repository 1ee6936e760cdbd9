"""Request pipeline shared by every endpoint.

Each call goes through one ``httpx.AsyncClient``: a request hook attaches the
bearer token, the response is unwrapped into a ``SuccessResult``, and every
failure is turned into an ``ApiError`` carrying an ``ErrorResult``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .config import settings
from .credentials import TOKEN_KEY, CredentialStore, MemoryCredentialStore
from .errors import ApiError, classify_http_error, unexpected_error
from .models import ErrorResult, SessionExpired, SuccessResult, UploadForm
from .navigation import NavigationSignal, navigation_signal

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
MULTIPART_CONTENT_TYPE = "multipart/form-data"

# per-request flags travel to the request hook through httpx extensions
_USE_TOKEN = "pdfchat.use_token"
_BEARER_TOKEN = "pdfchat.bearer_token"


def _json_or_none(response: httpx.Response) -> Optional[Any]:
    try:
        return response.json()
    except ValueError:
        return None


class ApiService:
    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        store: Optional[CredentialStore] = None,
        navigation: Optional[NavigationSignal] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url or settings.api_url
        self.store: CredentialStore = store if store is not None else MemoryCredentialStore()
        self.navigation = navigation if navigation is not None else navigation_signal
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout or settings.timeout_seconds),
            transport=transport,
            event_hooks={"request": [self._attach_token]},
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def _attach_token(self, request: httpx.Request) -> None:
        if not request.extensions.get(_USE_TOKEN, True):
            return
        token = request.extensions.get(_BEARER_TOKEN) or self.store.get(TOKEN_KEY)
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    def _handle_api_error(self, method: str, path: str, exc: Exception) -> ApiError:
        result: ErrorResult
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            logger.error(f"{method} {path} failed with HTTP {status}")
            result = classify_http_error(status, _json_or_none(exc.response))
        else:
            logger.exception(f"{method} {path} failed: {type(exc).__name__}: {exc}")
            result = unexpected_error()

        if isinstance(result, SessionExpired):
            if result.clear_token:
                try:
                    self.store.delete(TOKEN_KEY)
                except Exception:
                    logger.exception(f"could not clear stored token after 401 on {method} {path}")
            self.navigation.signal_navigate(result.navigate_to)
        return ApiError(result)

    async def request(
        self,
        method: str,
        path: str,
        data: Any = None,
        use_token: bool = True,
        content_type: str = JSON_CONTENT_TYPE,
        *,
        token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> SuccessResult:
        """Send one request and unwrap the response.

        ``token`` replaces the stored token for this call only and ``params``
        go into the query string. Raises ``ApiError`` on any failure; nothing
        else escapes.
        """
        method = method.upper()
        headers: Dict[str, str] = {}
        extensions: Dict[str, Any] = {_USE_TOKEN: use_token}
        if token:
            extensions[_BEARER_TOKEN] = token

        try:
            body: Dict[str, Any] = {}
            if params:
                body["params"] = params
            if content_type.startswith(MULTIPART_CONTENT_TYPE):
                # httpx writes the Content-Type itself so the boundary is included
                if not isinstance(data, UploadForm):
                    raise TypeError(f"multipart body must be an UploadForm, got {type(data).__name__}")
                body["files"] = data.httpx_files()
                if data.fields:
                    body["data"] = data.fields
            else:
                headers["Content-Type"] = content_type
                if isinstance(data, (bytes, str)):
                    body["content"] = data
                elif data is not None:
                    body["json"] = data

            logger.debug(f"{method} {path}")
            response = await self._client.request(method, path, headers=headers, extensions=extensions, **body)
            response.raise_for_status()
            payload = response.json() if response.content else None
        except Exception as exc:
            raise self._handle_api_error(method, path, exc) from exc

        return SuccessResult(data=payload)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
