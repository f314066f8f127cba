# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: MailChimp client — blocking HTTP transport to the Marketing API v3.

Every transport failure or non-2xx answer becomes a ``ProviderError`` carrying
MailChimp's own message text. No retries: the caller decides.
"""
import time
from typing import Any, Dict, Optional

import httpx

from member_sync.core.config import settings
from member_sync.core.exceptions import ProviderError
from member_sync.core.logging import get_logger
from member_sync.metrics import PROVIDER_LATENCY, PROVIDER_REQUESTS

logger = get_logger(__name__)


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        message = data.get("detail") or data.get("title")
        if message:
            return str(message)
    return f"MailChimp responded {resp.status_code} {resp.reason_phrase}".strip()


class MailChimpClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = (base_url or settings.mailchimp_base_url).rstrip("/")
        self._api_key = settings.MAILCHIMP_API_KEY if api_key is None else api_key
        self._timeout = timeout or settings.MAILCHIMP_TIMEOUT
        self._transport = transport

    def post(self, path: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._request("POST", path, body)

    def patch(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PATCH", path, body)

    def delete(self, path: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._request("DELETE", path, body)

    def _request(self, method: str, path: str,
                 body: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        url = f"{self._base_url}/{path.lstrip('/')}"
        start = time.monotonic()
        try:
            with httpx.Client(
                timeout=self._timeout,
                auth=("anystring", self._api_key),
                transport=self._transport,
            ) as client:
                resp = client.request(method, url, json=body)
        except httpx.HTTPError as exc:
            PROVIDER_REQUESTS.labels(method=method, status="error").inc()
            logger.warning("MailChimp unreachable: %s %s: %s", method, path, exc)
            raise ProviderError(f"MailChimp unreachable: {exc}") from exc

        PROVIDER_LATENCY.labels(method=method).observe(time.monotonic() - start)
        PROVIDER_REQUESTS.labels(method=method, status=str(resp.status_code)).inc()

        if not resp.is_success:
            message = _error_message(resp)
            logger.warning("MailChimp %s %s failed: status=%d, message=%s",
                           method, path, resp.status_code, message,
                           extra={"status_code": resp.status_code})
            raise ProviderError(message, status_code=resp.status_code)

        logger.info("MailChimp %s %s: status=%d", method, path, resp.status_code)
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError:
            return {}
