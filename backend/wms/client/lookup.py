from __future__ import annotations

import logging
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from wms.client.errors import NotFoundError, StockLookupError, error_message


logger = logging.getLogger(__name__)


class ProductRef(BaseModel):
    id: int
    sku: str
    name: str
    purchase_price: float = 0
    selling_price: float = 0


class LocationRef(BaseModel):
    id: int
    name: str


class StockStatusRef(BaseModel):
    id: int
    name: str


class LookupClient:
    """Read-only queries against the product, location and stock endpoints."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self.http = http

    async def _get(self, url: str, failure: str) -> httpx.Response:
        try:
            response = await self.http.get(url)
        except httpx.HTTPError as exc:
            logger.warning("%s: %s", failure, exc)
            raise StockLookupError(f"{failure}: {exc}") from exc
        return response

    async def resolve_by_code(self, code: str) -> ProductRef:
        response = await self._get(f"/products/by-code/{quote(code, safe='')}", "Product lookup failed")
        if response.status_code == 404:
            raise NotFoundError(error_message(response, f"Product code {code} not found"), 404)
        if response.is_error:
            raise StockLookupError(error_message(response, "Product lookup failed"), response.status_code)
        return ProductRef.model_validate(response.json())

    async def fetch_system_count(self, product_id: int, location_id: int) -> int:
        response = await self._get(f"/stocks/specific/{product_id}/{location_id}", "System stock lookup failed")
        if response.is_error:
            raise StockLookupError(
                error_message(response, "Failed to load system stock for this location"),
                response.status_code,
            )
        return int(response.json().get("system_count") or 0)

    async def list_locations(self) -> list[LocationRef]:
        response = await self._get("/locations", "Location lookup failed")
        if response.is_error:
            raise StockLookupError(error_message(response, "Failed to load locations"), response.status_code)
        return [LocationRef.model_validate(row) for row in response.json()]

    async def list_stock_statuses(self) -> list[StockStatusRef]:
        response = await self._get("/stocks/statuses", "Stock status lookup failed")
        if response.is_error:
            raise StockLookupError(error_message(response, "Failed to load stock statuses"), response.status_code)
        return [StockStatusRef.model_validate(row) for row in response.json()]
