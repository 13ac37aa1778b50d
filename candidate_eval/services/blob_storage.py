"""
Vercel Blob storage client used by the share endpoints.
"""
import asyncio
from typing import Any, Dict, List

import requests

from candidate_eval.utils.config import Settings, require_blob_token
from candidate_eval.utils.exceptions import UpstreamError
from candidate_eval.utils.logging_config import get_logger

logger = get_logger(__name__)


class BlobStorageClient:
    def __init__(
        self,
        token: str,
        base_url: str = "https://blob.vercel-storage.com",
        api_version: str = "7",
        timeout: float = 30.0,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "BlobStorageClient":
        return cls(
            token=require_blob_token(settings),
            base_url=settings.blob_api_url,
            api_version=settings.blob_api_version,
            timeout=settings.blob_timeout_seconds,
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "authorization": f"Bearer {self.token}",
            "x-api-version": self.api_version,
        }

    def _request(self, operation: str, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = requests.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise UpstreamError(f"Blob {operation} failed: {e}", service_name="blob", cause=e) from e
        if not response.ok:
            logger.error(f"Blob {operation} failed with status {response.status_code}")
            raise UpstreamError(
                f"Blob {operation} failed: {response.status_code} {response.text}",
                service_name="blob",
                status_code=response.status_code,
            )
        return response

    def _put(self, pathname: str, body: bytes, content_type: str, add_random_suffix: bool) -> Dict[str, Any]:
        headers = {
            **self._headers(),
            "x-content-type": content_type,
            "x-add-random-suffix": "1" if add_random_suffix else "0",
            "Content-Type": "application/octet-stream",
        }
        response = self._request("upload", "PUT", f"{self.base_url}/{pathname}", data=body, headers=headers)
        return response.json()

    def _list(self, prefix: str, limit: int) -> List[Dict[str, Any]]:
        response = self._request(
            "list", "GET", self.base_url,
            params={"prefix": prefix, "limit": limit},
            headers=self._headers(),
        )
        return response.json().get("blobs") or []

    def _fetch_json(self, url: str) -> Any:
        return self._request("fetch", "GET", url).json()

    async def put(self, pathname: str, body: bytes, content_type: str = "application/octet-stream",
                  add_random_suffix: bool = True) -> Dict[str, Any]:
        """Store a blob; returns the storage response ({"url": ..., "pathname": ...})."""
        logger.info(f"Uploading blob {pathname} ({len(body)} bytes)")
        return await asyncio.to_thread(self._put, pathname, body, content_type, add_random_suffix)

    async def find_by_prefix(self, prefix: str, limit: int = 1) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._list, prefix, limit)

    async def fetch_json(self, url: str) -> Any:
        return await asyncio.to_thread(self._fetch_json, url)
