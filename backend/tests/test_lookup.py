import httpx
import pytest

from fake_backend import FakeBackend, fake_client
from wms.client.errors import NotFoundError, StockLookupError
from wms.client.lookup import LookupClient


pytestmark = pytest.mark.anyio


async def test_resolve_by_code_returns_product_with_prices():
    backend = FakeBackend()
    async with fake_client(backend) as http:
        product = await LookupClient(http).resolve_by_code("SKU123")

    assert product.id == 7
    assert product.name == "Widget"
    assert product.purchase_price == 10.0


async def test_bearer_token_is_attached_per_request():
    backend = FakeBackend()
    async with fake_client(backend, token="abc") as http:
        await LookupClient(http).list_locations()

    assert backend.requests[0].headers["Authorization"] == "Bearer abc"


async def test_unknown_code_raises_not_found():
    backend = FakeBackend()
    async with fake_client(backend) as http:
        with pytest.raises(NotFoundError) as excinfo:
            await LookupClient(http).resolve_by_code("MISSING")

    assert excinfo.value.status_code == 404
    assert isinstance(excinfo.value, LookupError)


async def test_fetch_system_count_backend_error():
    backend = FakeBackend()
    backend.fail("/stocks/specific", 500, "database unavailable")
    async with fake_client(backend) as http:
        with pytest.raises(StockLookupError) as excinfo:
            await LookupClient(http).fetch_system_count(7, 1)

    assert excinfo.value.message == "database unavailable"


async def test_transport_failure_becomes_lookup_error():
    def explode(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(base_url="http://wms.test/api", transport=httpx.MockTransport(explode)) as http:
        with pytest.raises(StockLookupError):
            await LookupClient(http).fetch_system_count(7, 1)


async def test_missing_row_counts_as_zero():
    backend = FakeBackend()
    async with fake_client(backend) as http:
        assert await LookupClient(http).fetch_system_count(7, 99) == 0
