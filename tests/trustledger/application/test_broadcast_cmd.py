"""Application tests for BroadcastTrustScore."""

import pytest
from protean import current_domain

from trustledger.access.management import PauseLedger
from trustledger.broadcast.sending import BroadcastTrustScore, get_broadcast
from trustledger.broadcast.snapshot import decode_snapshot
from trustledger.dispatch import dispatch
from trustledger.errors import InvalidInput, NotFound, PausedState, RemoteSendFailure, Unauthorized
from trustledger.gateway.port import MessagingGateway
from trustledger.gateway import set_gateway
from trustledger.product.activation import SetProductActive
from trustledger.review.posting import PostReview


def _review(product_id="prod-001", transaction_id="tx-1", rating=80):
    dispatch(PostReview(reviewer="acct-alice", product_id=product_id, transaction_id=transaction_id, rating=rating))


def _broadcast(**overrides):
    defaults = {
        "caller": "acct-broadcaster",
        "product_id": "prod-001",
        "destination_domain": 10,
        "destination_address": "0xdest",
        "gas_budget": 200000,
        "fee_token": "0xfee",
        "fee_amount": 1000,
    }
    defaults.update(overrides)
    return dispatch(BroadcastTrustScore(**defaults))


class _ExplodingGateway(MessagingGateway):
    def send(self, **kwargs):
        raise ConnectionError("relay unreachable")


class TestBroadcastTrustScore:
    def test_returns_message_id(self, product, gateway):
        _review()
        message_id = _broadcast()
        assert message_id.startswith("0x")
        assert len(gateway.calls) == 1

    def test_sends_snapshot_payload(self, product, gateway):
        _review()
        _broadcast()

        call = gateway.calls[0]
        assert call["destination_domain"] == 10
        assert call["destination_address"] == "0xdest"
        assert call["fee_token"] == "0xfee"
        assert call["fee_amount"] == 1000
        assert call["gas_budget"] == 200000

        snapshot = decode_snapshot(call["payload"])
        assert snapshot.product_id == "prod-001"
        assert snapshot.average_rating == 8000
        assert snapshot.total_reviews == 1
        assert snapshot.last_updated is not None

    def test_records_broadcast(self, product):
        _review()
        message_id = _broadcast()

        broadcast = get_broadcast(message_id)
        assert broadcast.product_id == "prod-001"
        assert broadcast.average_rating == 8000
        assert broadcast.total_reviews == 1
        assert str(broadcast.sent_by) == "acct-broadcaster"
        assert decode_snapshot(broadcast.payload_bytes()).average_rating == 8000

    def test_stores_broadcast_event(self, product):
        _review()
        message_id = _broadcast()

        messages = current_domain.event_store.store.read("trustledger::broadcast")
        broadcast_events = [
            m
            for m in messages
            if m.metadata and m.metadata.headers and m.metadata.headers.type.endswith("TrustScoreBroadcast.v1")
        ]
        assert len(broadcast_events) == 1
        assert broadcast_events[0].data["message_id"] == message_id
        assert broadcast_events[0].data["average_rating"] == 8000
        assert broadcast_events[0].data["total_reviews"] == 1

    def test_unknown_broadcast(self):
        with pytest.raises(NotFound):
            get_broadcast("0xmissing")


class TestBroadcastRejections:
    def test_no_reviews(self, product, gateway):
        with pytest.raises(InvalidInput):
            _broadcast()
        assert gateway.calls == []

    def test_inactive_product(self, product, gateway):
        _review()
        dispatch(SetProductActive(caller="acct-vendor", product_id=product, is_active=False))
        with pytest.raises(InvalidInput):
            _broadcast()
        assert gateway.calls == []

    def test_unknown_product(self, access):
        with pytest.raises(NotFound):
            _broadcast(product_id="prod-missing")

    @pytest.mark.parametrize("product_id", [None, ""])
    def test_missing_product(self, access, gateway, product_id):
        with pytest.raises(NotFound):
            _broadcast(product_id=product_id)
        assert gateway.calls == []

    def test_requires_broadcaster(self, product):
        _review()
        with pytest.raises(Unauthorized):
            _broadcast(caller="acct-manager")

    def test_paused(self, product):
        _review()
        dispatch(PauseLedger(caller="acct-admin"))
        with pytest.raises(PausedState):
            _broadcast()

    def test_zero_destination_domain(self, product):
        _review()
        with pytest.raises(InvalidInput):
            _broadcast(destination_domain=0)

    def test_zero_destination_address(self, product):
        _review()
        with pytest.raises(InvalidInput):
            _broadcast(destination_address="0x0000")

    def test_negative_fee(self, product):
        _review()
        with pytest.raises(InvalidInput):
            _broadcast(fee_amount=-1)

    def test_gateway_rejection(self, product, gateway):
        _review()
        gateway.configure(should_succeed=False, failure_reason="Insufficient fee")
        with pytest.raises(RemoteSendFailure) as exc:
            _broadcast()
        assert "Insufficient fee" in str(exc.value.messages)

    def test_gateway_exception(self, product):
        _review()
        set_gateway(_ExplodingGateway())
        with pytest.raises(RemoteSendFailure) as exc:
            _broadcast()
        assert "relay unreachable" in str(exc.value.messages)
