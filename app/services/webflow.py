"""Client for creating items in Webflow CMS collections."""

from __future__ import annotations

from typing import Any, Mapping

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..errors import WebflowError
from ..models import CreatedItem
from .http import request_json


class WebflowClient:
    """Thin wrapper around the Webflow v1 collection items API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        if not settings.webflow_api_token:
            raise ValueError("Webflow API token is required when initialising WebflowClient")
        self._settings = settings
        self._client = http_client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._settings.webflow_api_token}",
            "accept-version": "1.0.0",
            "User-Agent": f"{self._settings.app_name} (moviesync)",
        }

    async def create_item(
        self, collection_id: str, fields: Mapping[str, Any]
    ) -> CreatedItem:
        """Create one item in ``collection_id`` and return the stored item."""

        payload = await request_json(
            self._client,
            "POST",
            f"/collections/{collection_id}/items",
            service="Webflow",
            error_cls=WebflowError,
            max_retries=self._settings.http_max_retries,
            headers=self._headers(),
            json={"fields": dict(fields)},
        )
        try:
            return CreatedItem.model_validate(payload)
        except ValidationError as exc:
            raise WebflowError(
                f"Unexpected Webflow response when creating an item in {collection_id}"
            ) from exc
