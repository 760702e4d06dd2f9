"""
Thin async client for the Cloudinary Admin API.

Only the calls the media and gallery endpoints need are implemented:
prefix listings (with cursor pagination), asset deletion and the
connectivity ping.
"""

from typing import Any

import httpx

from echocatering.api.v1.configs.config import settings
from echocatering.api.v1.configs.logging_init import logger
from echocatering.api.v1.configs.settings_models import CloudinaryConfig

MAX_PAGE_SIZE = 500


class CloudinaryError(Exception):
    def __init__(self, message: str, http_code: int | None = None, name: str | None = None):
        super().__init__(message)
        self.message = message
        self.http_code = http_code
        self.name = name or self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "message": self.message, "http_code": self.http_code}


class CloudinaryClient:
    def __init__(
        self,
        config: CloudinaryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or settings.cloudinary
        self.transport = transport

    @property
    def base_url(self) -> str:
        return f"{self.config.api_base_url.rstrip('/')}/{self.config.cloud_name}"

    def config_summary(self) -> dict[str, Any]:
        """Which credentials are present, without exposing them."""
        return {
            "cloud_name": self.config.cloud_name,
            "has_api_key": bool(self.config.api_key),
            "has_api_secret": bool(self.config.api_secret),
        }

    def _client(self) -> httpx.AsyncClient:
        if not self.config.configured:
            raise CloudinaryError("Cloudinary credentials are not configured", name="ConfigError")
        return httpx.AsyncClient(
            base_url=self.base_url,
            auth=(self.config.api_key, self.config.api_secret),
            timeout=self.config.timeout,
            transport=self.transport,
        )

    async def _request(
        self, client: httpx.AsyncClient, method: str, path: str, params: dict | None = None
    ) -> dict:
        try:
            response = await client.request(method, path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = e.response.text
            try:
                message = e.response.json().get("error", {}).get("message", message)
            except ValueError:
                pass
            raise CloudinaryError(message, http_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            raise CloudinaryError(str(e) or e.__class__.__name__, name=e.__class__.__name__) from e
        return response.json()

    async def list_by_prefix(
        self, prefix: str, resource_type: str = "image", max_results: int = MAX_PAGE_SIZE
    ) -> list[dict[str, Any]]:
        """
        List uploaded resources under ``prefix``, following ``next_cursor``
        until ``max_results`` resources were collected or the listing ends.
        """
        prefix = prefix.rstrip("/")
        results: list[dict[str, Any]] = []
        next_cursor = None

        async with self._client() as client:
            while len(results) < max_results:
                params = {
                    "type": "upload",
                    "prefix": prefix,
                    "max_results": min(MAX_PAGE_SIZE, max_results - len(results)),
                }
                if next_cursor:
                    params["next_cursor"] = next_cursor

                payload = await self._request(client, "GET", f"/resources/{resource_type}", params)
                batch = payload.get("resources")
                results.extend(batch if isinstance(batch, list) else [])

                next_cursor = payload.get("next_cursor")
                if not next_cursor:
                    break

        logger.debug(f"Cloudinary listed {len(results)} {resource_type} resources under {prefix}")
        return results

    async def delete_resource(self, public_id: str, resource_type: str = "image") -> bool:
        """Delete one uploaded asset. Returns False when Cloudinary did not find it."""
        async with self._client() as client:
            payload = await self._request(
                client,
                "DELETE",
                f"/resources/{resource_type}/upload",
                {"public_ids[]": public_id},
            )
        status = (payload.get("deleted") or {}).get(public_id)
        logger.debug(f"Cloudinary delete {resource_type} {public_id}: {status}")
        return status == "deleted"

    async def ping(self) -> dict[str, Any]:
        async with self._client() as client:
            return await self._request(client, "GET", "/ping")


def get_cloudinary_client() -> CloudinaryClient:
    """FastAPI dependency, overridden in tests."""
    return CloudinaryClient()
