from __future__ import annotations

import logging
from enum import Enum

import httpx

from wms.client.errors import InvalidAdjustment, SubmissionError, SubmissionInProgress, error_message
from wms.client.lookup import LocationRef, ProductRef


logger = logging.getLogger(__name__)

DEFAULT_STOCK_STATUS_ID = 1


class Direction(str, Enum):
    INCREASE = "in"
    DECREASE = "out"


def direction_for(variance: int) -> Direction:
    return Direction.INCREASE if variance > 0 else Direction.DECREASE


def compose_note(reason: str, variance: int) -> str:
    reason = reason.strip() or "-"
    return f"Stock opname adjustment ({variance:+d}). Reason: {reason}"


def build_adjustment(
    product: ProductRef,
    location: LocationRef,
    variance: int,
    reason: str,
    stock_status_id: int = DEFAULT_STOCK_STATUS_ID,
) -> tuple[Direction, dict]:
    direction = direction_for(variance)
    payload = {
        "notes": compose_note(reason, variance),
        "items": [
            {
                "product_id": product.id,
                "location_id": location.id,
                "quantity": abs(variance),
                "stock_status_id": stock_status_id,
                "purchase_price": product.purchase_price,
                "selling_price": product.selling_price,
            }
        ],
    }
    return direction, payload


class AdjustmentSubmitter:
    """Turns a non-zero variance into one inbound or outbound transaction.

    No deduplication happens here; retrying after a failure relies on the
    backend applying each transaction atomically.
    """

    def __init__(self, http: httpx.AsyncClient, stock_status_id: int = DEFAULT_STOCK_STATUS_ID) -> None:
        self.http = http
        self.stock_status_id = stock_status_id
        self.is_submitting = False

    async def submit(
        self,
        product: ProductRef | None,
        location: LocationRef | None,
        variance: int,
        reason: str = "",
    ) -> dict:
        if product is None or location is None:
            raise InvalidAdjustment("Product and location are required")
        if variance == 0:
            raise InvalidAdjustment("Variance is zero; no adjustment needed")
        if self.is_submitting:
            raise SubmissionInProgress("An adjustment is already being submitted")

        direction, payload = build_adjustment(product, location, variance, reason, self.stock_status_id)
        self.is_submitting = True
        try:
            try:
                response = await self.http.post(f"/transactions/{direction.value}", json=payload)
            except httpx.HTTPError as exc:
                logger.warning("Adjustment request failed: %s", exc)
                raise SubmissionError(f"Failed to submit adjustment: {exc}") from exc

            if response.is_error:
                message = error_message(response, "Failed to record stock opname adjustment")
                logger.warning("Adjustment rejected (%s): %s", response.status_code, message)
                raise SubmissionError(message, response.status_code)
        finally:
            self.is_submitting = False

        logger.info(
            "Submitted %s adjustment of %d for product %s at location %s",
            direction.name.lower(),
            abs(variance),
            product.sku,
            location.name,
        )
        return response.json()
