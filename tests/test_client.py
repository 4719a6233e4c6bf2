"""Tests for request signing and envelope decoding."""

import hashlib
import hmac
import json
from decimal import Decimal

import httpx
import pytest

from bitkub_hook.client import API_KEY_HEADER, canonical_json, result_adapter, sign_payload
from bitkub_hook.error_catalog import KnownError, UnknownError
from bitkub_hook.models import Balance, Order, WalletBalances


class TestSigning:
    def test_canonical_json_sorts_keys_without_whitespace(self):
        assert canonical_json({"sym": "THB_IOST", "amt": 10}) == '{"amt":10,"sym":"THB_IOST"}'

    def test_canonical_json_renders_decimals_as_numbers(self):
        assert canonical_json({"rat": Decimal("0.25")}) == '{"rat":0.25}'

    def test_sign_payload_is_hmac_sha256_hex(self):
        payload = '{"ts":1700000000}'
        expected = hmac.new(b"secret", payload.encode(), hashlib.sha256).hexdigest()

        assert sign_payload("secret", payload) == expected

    def test_signature_is_deterministic(self, make_client):
        client = make_client({"error": 0, "result": {}})
        params = {"sym": "THB_IOST", "amt": Decimal("10.5")}

        assert client.sign(params) == client.sign(params)

    def test_sign_adds_ts_then_signs_without_sig(self, make_client, test_config, fixed_ts):
        client = make_client()
        signed = client.sign({"sym": "THB_IOST"})

        assert signed["ts"] == fixed_ts
        unsigned = {"sym": "THB_IOST", "ts": fixed_ts}
        assert signed["sig"] == sign_payload(test_config.api_secret, canonical_json(unsigned))

    def test_sign_does_not_mutate_input(self, make_client):
        params = {"sym": "THB_IOST"}
        make_client().sign(params)

        assert params == {"sym": "THB_IOST"}

    @pytest.mark.parametrize("reserved", ["ts", "sig"])
    def test_sign_rejects_reserved_keys(self, make_client, reserved):
        with pytest.raises(ValueError, match="reserved keys"):
            make_client().sign({reserved: 1})

    def test_adding_params_after_signing_changes_signature(self, make_client, test_config):
        signed = make_client().sign({"sym": "THB_IOST"})
        tampered = {k: v for k, v in signed.items() if k != "sig"}
        tampered["amt"] = 1

        assert sign_payload(test_config.api_secret, canonical_json(tampered)) != signed["sig"]


class TestCall:
    @pytest.mark.asyncio
    async def test_request_shape(self, make_client, recorded_requests, balances_payload, fixed_ts):
        client = make_client({"error": 0, "result": balances_payload})

        await client.call("market/balances", {}, WalletBalances)

        request = recorded_requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://bitkub.test/api/market/balances"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers[API_KEY_HEADER] == "test-api-key"
        body = json.loads(request.content)
        assert body["ts"] == fixed_ts
        assert len(body["sig"]) == 64

    @pytest.mark.asyncio
    async def test_decodes_typed_result(self, make_client, balances_payload):
        client = make_client({"error": 0, "result": balances_payload})

        response = await client.call("market/balances", {}, WalletBalances)

        assert response.ok
        assert response.error is None
        assert response.result["IOST"].available == Decimal("37.5")
        assert response.result["IOST"].reserved == Decimal("2.5")

    @pytest.mark.asyncio
    async def test_decodes_order(self, make_client, order_payload):
        client = make_client({"error": 0, "result": order_payload})

        response = await client.call("market/place-bid", {"sym": "THB_BTC"}, Order)

        assert isinstance(response.result, Order)
        assert response.result.hash == order_payload["hash"]
        assert response.result.fee_credit_used == Decimal("2.5")

    @pytest.mark.asyncio
    async def test_known_error_code(self, make_client):
        client = make_client({"error": 18})

        response = await client.call("market/place-bid", {}, Order)

        assert response.result is None
        assert response.error == KnownError(code=18, description="Insufficient balance")
        assert not response.no_response

    @pytest.mark.asyncio
    async def test_server_message_overrides_catalog(self, make_client):
        client = make_client({"error": 18, "message": "THB balance too low"})

        response = await client.call("market/place-bid", {}, Order)

        assert response.error.code == 18
        assert response.error.description == "THB balance too low"

    @pytest.mark.asyncio
    async def test_unknown_error_code_is_not_dropped(self, make_client):
        client = make_client({"error": 77})

        response = await client.call("market/place-bid", {}, Order)

        assert isinstance(response.error, UnknownError)
        assert response.error.code == 77
        assert not response.ok
        assert not response.no_response

    @pytest.mark.asyncio
    async def test_transport_failure_is_no_response(self, make_client):
        client = make_client(exc=httpx.ConnectError("connection refused"))

        response = await client.call("market/place-bid", {}, Order)

        assert response.no_response
        assert response.error is None and response.result is None

    @pytest.mark.asyncio
    async def test_non_json_body_is_no_response(self, make_client):
        client = make_client(raw=b"<html>502 Bad Gateway</html>", status_code=502)

        response = await client.call("market/place-bid", {}, Order)

        assert response.no_response

    @pytest.mark.asyncio
    async def test_missing_error_code_is_no_response(self, make_client, order_payload):
        client = make_client({"result": order_payload})

        response = await client.call("market/place-bid", {}, Order)

        assert response.no_response

    @pytest.mark.asyncio
    async def test_result_of_wrong_shape_is_no_response(self, make_client):
        client = make_client({"error": 0, "result": {"id": "not-a-number"}})

        response = await client.call("market/place-bid", {}, Order)

        assert response.no_response

    @pytest.mark.asyncio
    async def test_success_without_result_is_no_response(self, make_client):
        client = make_client({"error": 0})

        response = await client.call("market/place-bid", {}, Order)

        assert response.no_response

    @pytest.mark.asyncio
    async def test_empty_path_rejected(self, make_client):
        with pytest.raises(ValueError, match="path cannot be empty"):
            await make_client().call("", {}, Order)

    @pytest.mark.asyncio
    async def test_aclose_releases_http_client(self, make_client):
        client = make_client({"error": 0, "result": {}})
        await client.call("market/wallet", {}, dict)

        await client.aclose()

        assert client._http is None


class TestResultAdapter:
    def test_adapter_is_reused_per_result_type(self):
        assert result_adapter(Order) is result_adapter(Order)
        assert result_adapter(WalletBalances) is result_adapter(dict[str, Balance])

    def test_distinct_types_get_distinct_adapters(self):
        assert result_adapter(Order) is not result_adapter(WalletBalances)

    @pytest.mark.asyncio
    async def test_call_decodes_through_cached_adapter(self, make_client, order_payload):
        result_adapter.cache_clear()
        client = make_client({"error": 0, "result": order_payload})

        await client.call("market/place-bid", {}, Order)
        await client.call("market/place-bid", {}, Order)

        info = result_adapter.cache_info()
        assert info.misses == 1
        assert info.hits == 1
