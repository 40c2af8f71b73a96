from wms.client.errors import (
    InvalidAdjustment,
    NotFoundError,
    StockLookupError,
    SubmissionError,
    SubmissionInProgress,
    WmsClientError,
)
from wms.client.lookup import LocationRef, LookupClient, ProductRef, StockStatusRef
from wms.client.notifier import Notifier
from wms.client.opname import Phase, StockOpnameWorkflow
from wms.client.session import ApiSession, BearerAuth, build_http_client, login
from wms.client.submitter import AdjustmentSubmitter, Direction
from wms.client.variance import compute_variance

__all__ = [
    "AdjustmentSubmitter",
    "ApiSession",
    "BearerAuth",
    "Direction",
    "InvalidAdjustment",
    "LocationRef",
    "LookupClient",
    "Notifier",
    "NotFoundError",
    "Phase",
    "ProductRef",
    "StockLookupError",
    "StockOpnameWorkflow",
    "StockStatusRef",
    "SubmissionError",
    "SubmissionInProgress",
    "WmsClientError",
    "build_http_client",
    "compute_variance",
    "login",
]
