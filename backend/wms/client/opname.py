"""Stock opname: scan a code, pick a location, count, and reconcile the difference.

Every state transition ends in :meth:`StockOpnameWorkflow.reconcile`, which
refreshes the system count when both product and location are known and
recomputes the variance from the latest inputs.

``system_count`` is ``None`` while the count for the current pair is unknown:
before both are chosen, while a fetch is in flight, or after a fetch fails.
An unknown count never produces a variance, so nothing can be submitted
against it.
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum

from wms.client.errors import NotFoundError, StockLookupError, SubmissionError
from wms.client.lookup import LocationRef, LookupClient, ProductRef, StockStatusRef
from wms.client.notifier import Notifier
from wms.client.submitter import AdjustmentSubmitter
from wms.client.variance import compute_variance
from wms.core.config import get_settings


logger = logging.getLogger(__name__)

SCAN_FIELD = "scan_code"
LOCATION_FIELD = "location"
COUNT_FIELD = "physical_count"


class Phase(str, Enum):
    IDLE = "idle"
    PRODUCT_RESOLVED = "product_resolved"
    LOCATION_SELECTED = "location_selected"
    COUNT_ENTERED = "count_entered"
    VARIANCE_COMPUTED = "variance_computed"
    SUBMITTING = "submitting"
    ERROR = "error"


class StockOpnameWorkflow:
    def __init__(
        self,
        lookup: LookupClient,
        submitter: AdjustmentSubmitter,
        notifier: Notifier | None = None,
    ) -> None:
        self.lookup = lookup
        self.submitter = submitter
        self.notifier = notifier or Notifier()
        self.locations: list[LocationRef] = []
        self.stock_statuses: list[StockStatusRef] = []
        self.ready = False
        self.is_submitting = False
        self._count_request = 0
        self.reset()

    def reset(self) -> None:
        self._count_request += 1
        self.scanned_code = ""
        self.product: ProductRef | None = None
        self.location: LocationRef | None = None
        self.physical_count: int | None = None
        self.system_count: int | None = None
        self.variance = 0
        self.phase = Phase.IDLE
        self.focus = SCAN_FIELD

    @property
    def can_submit(self) -> bool:
        return (
            self.ready
            and not self.is_submitting
            and self.product is not None
            and self.location is not None
            and self.system_count is not None
            and self.variance != 0
        )

    async def start(self) -> bool:
        """Load master data; the form is usable only once both lists arrive."""
        try:
            locations, statuses = await asyncio.gather(
                self.lookup.list_locations(),
                self.lookup.list_stock_statuses(),
            )
        except StockLookupError as exc:
            self.notifier.error(exc.message)
            return False

        self.locations = locations
        self.stock_statuses = statuses
        default_name = get_settings().default_stock_status_name.lower()
        for status in statuses:
            if status.name.lower() == default_name:
                self.submitter.stock_status_id = status.id
                break
        self.ready = True
        return True

    async def scan(self, code: str) -> ProductRef | None:
        self.scanned_code = code.strip()
        self.product = None
        if not self.scanned_code:
            self.notifier.error("Scan or type a product code first")
        else:
            try:
                self.product = await self.lookup.resolve_by_code(self.scanned_code)
            except NotFoundError:
                self.notifier.error(f"Product code {self.scanned_code} not found")
            except StockLookupError as exc:
                self.notifier.error(exc.message)

        if self.product is not None:
            self.focus = LOCATION_FIELD if self.location is None else COUNT_FIELD
        await self.reconcile()
        return self.product

    async def select_location(self, location_id: int | None) -> LocationRef | None:
        self.location = None
        if location_id is not None:
            self.location = next((loc for loc in self.locations if loc.id == location_id), None)
            if self.location is None:
                self.notifier.error(f"Unknown location {location_id}")
        if self.location is not None:
            self.focus = COUNT_FIELD
        await self.reconcile()
        return self.location

    async def enter_physical_count(self, count: int | None) -> int:
        if count is not None and count < 0:
            self.notifier.error("Physical count cannot be negative")
            return self.variance
        self.physical_count = count
        await self.reconcile(refetch=False)
        return self.variance

    async def reconcile(self, refetch: bool = True) -> None:
        if refetch:
            # any pair change invalidates the count and every request still in flight
            self._count_request += 1
            self.system_count = None
        self._recompute()

        if not refetch or self.product is None or self.location is None:
            return

        ticket = self._count_request
        try:
            count = await self.lookup.fetch_system_count(self.product.id, self.location.id)
        except StockLookupError as exc:
            if ticket == self._count_request:
                self.notifier.error(exc.message)
            return
        if ticket != self._count_request:
            logger.debug("Discarding system count %d for a superseded selection", count)
            return
        self.system_count = count
        self._recompute()

    def _recompute(self) -> None:
        if self.physical_count is None or self.system_count is None:
            self.variance = 0
        else:
            self.variance = compute_variance(self.physical_count, self.system_count)
        self.phase = self._derive_phase()

    def _derive_phase(self) -> Phase:
        if self.is_submitting:
            return Phase.SUBMITTING
        if self.product is None:
            return Phase.IDLE
        if self.system_count is not None and self.physical_count is not None:
            return Phase.VARIANCE_COMPUTED
        if self.physical_count is not None:
            return Phase.COUNT_ENTERED
        if self.location is not None:
            return Phase.LOCATION_SELECTED
        return Phase.PRODUCT_RESOLVED

    async def submit(self, reason: str = "") -> bool:
        if self.is_submitting:
            return False
        if self.product is None or self.location is None:
            self.notifier.error("Select a product and a location first")
            return False
        if self.system_count is None:
            self.notifier.error("System stock is unknown. Rescan the product or reselect the location.")
            return False
        if self.variance == 0:
            self.notifier.info("Physical count matches system stock. No adjustment needed.")
            return False

        variance = self.variance
        self.is_submitting = True
        self.phase = Phase.SUBMITTING
        try:
            await self.submitter.submit(self.product, self.location, variance, reason)
        except SubmissionError as exc:
            self.phase = Phase.ERROR
            self.notifier.error(exc.message)
            return False
        finally:
            self.is_submitting = False

        logger.info("Opname for %s at %s closed with variance %+d", self.product.sku, self.location.name, variance)
        self.reset()
        self.notifier.success(f"Stock opname recorded. Adjustment: {variance:+d}")
        return True
