"""FlutterwaveGateway — driven through httpx.MockTransport.

Tests cover:
    - Bearer auth header and JSON body reach the gateway
    - 2xx JSON is returned untouched
    - Non-2xx, timeouts, transport errors and non-JSON bodies → PaymentGatewayError
"""

import json

import httpx
import pytest

from app.core.errors import ErrorContext, PaymentGatewayError
from app.infrastructure.payment_gateway import FlutterwaveGateway

BASE = "https://api.flutterwave.test/v3"


def _gateway(handler) -> FlutterwaveGateway:
    return FlutterwaveGateway(
        secret_key="FLWSECK_TEST-abc",
        base_url=BASE + "/",
        transport=httpx.MockTransport(handler),
    )


async def test_create_checkout_posts_payload_with_bearer_auth():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"status": "success", "data": {"link": "https://pay"}})

    result = await _gateway(handler).create_checkout({"tx_ref": "TAH-1", "amount": 100})

    assert result == {"status": "success", "data": {"link": "https://pay"}}
    assert seen == {
        "method": "POST",
        "url": f"{BASE}/payments",
        "auth": "Bearer FLWSECK_TEST-abc",
        "body": {"tx_ref": "TAH-1", "amount": 100},
    }


async def test_verify_transaction_hits_verify_endpoint():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/v3/transactions/4975363/verify"
        return httpx.Response(200, json={"status": "success", "data": {"status": "successful"}})

    result = await _gateway(handler).verify_transaction("4975363")
    assert result["data"]["status"] == "successful"


async def test_verify_transaction_keeps_id_inside_its_path_segment():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["raw_path"] = request.url.raw_path
        return httpx.Response(200, json={"status": "success"})

    await _gateway(handler).verify_transaction("../../v3/transactions?page=1&x=")

    assert seen["raw_path"] == (
        b"/v3/transactions/..%2F..%2Fv3%2Ftransactions%3Fpage%3D1%26x%3D/verify"
    )


async def test_verify_by_reference_sends_tx_ref_query():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v3/transactions/verify_by_reference"
        assert request.url.params["tx_ref"] == "TAH-xyz"
        return httpx.Response(200, json={"status": "success"})

    assert await _gateway(handler).verify_by_reference("TAH-xyz") == {"status": "success"}


async def test_error_status_maps_to_gateway_error():
    def handler(request):
        return httpx.Response(401, json={"status": "error", "message": "Invalid authorization key"})

    ctx = ErrorContext(tx_ref="TAH-1")
    with pytest.raises(PaymentGatewayError) as exc:
        await _gateway(handler).create_checkout({}, context=ctx)
    assert exc.value.gateway_status == 401
    assert exc.value.context is ctx
    assert exc.value.http_status == 500


async def test_timeout_maps_to_gateway_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(PaymentGatewayError) as exc:
        await _gateway(handler).verify_transaction("1")
    assert exc.value.detail == "Gateway timeout"


async def test_connection_error_maps_to_gateway_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(PaymentGatewayError):
        await _gateway(handler).verify_transaction("1")


async def test_non_json_body_maps_to_gateway_error():
    def handler(request):
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(PaymentGatewayError) as exc:
        await _gateway(handler).verify_transaction("1")
    assert exc.value.detail == "Non-JSON gateway response"
