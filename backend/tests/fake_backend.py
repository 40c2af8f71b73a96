import json

import anyio
import httpx

from wms.client.lookup import LookupClient
from wms.client.notifier import Notifier
from wms.client.opname import StockOpnameWorkflow
from wms.client.session import ApiSession, build_http_client
from wms.client.submitter import AdjustmentSubmitter


class FakeBackend:
    """In-memory stand-in for the stock endpoints, served through httpx.MockTransport."""

    def __init__(self):
        self.products = {"SKU123": {"id": 7, "sku": "SKU123", "name": "Widget", "purchase_price": 10.0, "selling_price": 15.0}}
        self.locations = [{"id": 1, "name": "A1"}, {"id": 2, "name": "B2"}]
        self.statuses = [{"id": 3, "name": "Damaged"}, {"id": 5, "name": "Good"}]
        self.counts = {(7, 1): 50, (7, 2): 12}
        self.requests: list[httpx.Request] = []
        self.posted: list[tuple[str, dict]] = []
        # path prefix -> (status code, detail)
        self.failures: dict[str, tuple[int, str]] = {}
        # exact path -> (arrived, release)
        self.held: dict[str, tuple[anyio.Event, anyio.Event]] = {}

    def fail(self, prefix: str, status: int, detail: str) -> None:
        self.failures[prefix] = (status, detail)

    def hold(self, path: str) -> tuple[anyio.Event, anyio.Event]:
        """Park requests for ``path`` until the returned release event is set."""
        arrived, release = anyio.Event(), anyio.Event()
        self.held[path] = (arrived, release)
        return arrived, release

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        if path in self.held:
            arrived, release = self.held[path]
            arrived.set()
            await release.wait()
        for prefix, (status, detail) in self.failures.items():
            if path.startswith(prefix):
                return httpx.Response(status, json={"detail": detail})

        if request.method == "GET" and path.startswith("/products/by-code/"):
            product = self.products.get(path.rsplit("/", 1)[-1])
            if product is None:
                return httpx.Response(404, json={"detail": "Product not found"})
            return httpx.Response(200, json=product)
        if request.method == "GET" and path == "/locations":
            return httpx.Response(200, json=self.locations)
        if request.method == "GET" and path == "/stocks/statuses":
            return httpx.Response(200, json=self.statuses)
        if request.method == "GET" and path.startswith("/stocks/specific/"):
            product_id, location_id = (int(part) for part in path.split("/")[-2:])
            return httpx.Response(200, json={"system_count": self.counts.get((product_id, location_id), 0)})
        if request.method == "POST" and path in {"/transactions/in", "/transactions/out"}:
            self.posted.append((path, json.loads(request.content)))
            return httpx.Response(200, json={"msg": "ok", "transactionId": len(self.posted)})
        return httpx.Response(404, json={"detail": "Not Found"})

    def count_requests(self, prefix: str) -> int:
        return sum(1 for r in self.requests if r.url.path.removeprefix("/api").startswith(prefix))


class RecordingNotifier(Notifier):
    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def notify(self, level, message):
        self.messages.append((level, message))

    def levels(self):
        return [level for level, _ in self.messages]


def fake_client(backend: FakeBackend, token: str = "test-token") -> httpx.AsyncClient:
    session = ApiSession(base_url="http://wms.test/api", token=token)
    return build_http_client(session, transport=httpx.MockTransport(backend.handler))


def make_workflow(http: httpx.AsyncClient) -> tuple[StockOpnameWorkflow, RecordingNotifier]:
    notifier = RecordingNotifier()
    workflow = StockOpnameWorkflow(LookupClient(http), AdjustmentSubmitter(http), notifier)
    return workflow, notifier
