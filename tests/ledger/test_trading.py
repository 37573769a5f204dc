from __future__ import annotations

import random

import pytest

from marketplace.ledger import (
    CallContext,
    InMemoryTokenRepository,
    InsufficientFundsError,
    InvalidStateError,
    Ledger,
    LedgerValidationError,
    TokenNotFoundError,
    UnauthorizedError,
)
from marketplace.ledger.types import EventKind, TransferKind

DEPOSIT = 10**9
METADATA = {"title": "Sunset"}


def _mint(ledger: Ledger, *, price=100, royalty=None, splitpayments=None, count=1) -> list[int]:
    outcome = ledger.mint_batch(
        CallContext("alice.near", DEPOSIT),
        metadata=METADATA,
        receiver_id="alice.near",
        count=count,
        price=price,
        royalty=royalty,
        splitpayments=splitpayments,
    )
    return outcome.result.ids


def test_buy_with_commission_pays_everyone(ledger: Ledger) -> None:
    _mint(ledger, royalty={"artist.near": 1000})
    ledger.set_transaction_fee(CallContext("market.near", 1), 250)

    outcome = ledger.buy(CallContext("bob.near", 100), 0, memo="gift")

    payouts = {(i.receiver_id, i.kind): i.amount for i in outcome.transfers}
    assert payouts == {
        ("market.near", TransferKind.COMMISSION): 2,
        ("artist.near", TransferKind.ROYALTY): 10,
        ("alice.near", TransferKind.SELLER): 88,
    }
    assert outcome.result.new_owner == "bob.near"
    assert outcome.events[0].to_log()["data"] == [
        {"old_owner_id": "alice.near", "new_owner_id": "bob.near", "token_ids": ["0"], "memo": "gift"}
    ]
    assert outcome.events[0].kind is EventKind.TRANSFER


def test_buy_moves_owner_index_and_clears_splits(ledger: Ledger) -> None:
    _mint(ledger, royalty={"artist.near": 500}, splitpayments={"gallery.near": 500}, count=2)

    first = ledger.buy(CallContext("bob.near", 100), 0)
    assert any(i.kind is TransferKind.SPLIT_PAYMENT for i in first.transfers)

    record, _metadata = ledger.get_token(0)
    assert record.owner_id == "bob.near"
    assert record.splitpayments == {}
    assert record.royalty == {"artist.near": 500}
    assert record.approved_account_ids == {}
    assert ledger.tokens_for_owner("alice.near") == [1]
    assert ledger.tokens_for_owner("bob.near") == [0]

    second = ledger.buy(CallContext("carol.near", 100), 0)
    assert not any(i.kind is TransferKind.SPLIT_PAYMENT for i in second.transfers)
    assert ledger.tokens_for_owner("bob.near") == []
    assert ledger.tokens_for_owner("carol.near") == [0]


def test_buy_refunds_overpayment(ledger: Ledger) -> None:
    _mint(ledger)
    outcome = ledger.buy(CallContext("bob.near", 150), 0)

    refunds = [i for i in outcome.transfers if i.kind is TransferKind.REFUND]
    assert [(i.receiver_id, i.amount) for i in refunds] == [("bob.near", 50)]
    assert sum(i.amount for i in outcome.transfers if i.kind is not TransferKind.REFUND) == 100


def test_buy_own_token_rejected(ledger: Ledger) -> None:
    _mint(ledger)
    with pytest.raises(InvalidStateError):
        ledger.buy(CallContext("alice.near", 100), 0)


def test_buy_unlisted_token_rejected(ledger: Ledger) -> None:
    _mint(ledger, price=None)
    with pytest.raises(InvalidStateError):
        ledger.buy(CallContext("bob.near", 100), 0)


def test_buy_underpaid_rejected(ledger: Ledger) -> None:
    _mint(ledger)
    with pytest.raises(InsufficientFundsError):
        ledger.buy(CallContext("bob.near", 99), 0)
    assert ledger.get_token(0)[0].owner_id == "alice.near"


def test_buy_unknown_token(ledger: Ledger) -> None:
    with pytest.raises(TokenNotFoundError):
        ledger.buy(CallContext("bob.near", 100), 42)


def test_buy_with_invalid_buyer_id(ledger: Ledger) -> None:
    _mint(ledger)
    with pytest.raises(LedgerValidationError):
        ledger.buy(CallContext("Bob", 100), 0)


def test_purchases_conserve_value() -> None:
    rng = random.Random(7)
    for _ in range(100):
        ledger = Ledger(InMemoryTokenRepository(owner_id="market.near"), storage_byte_cost=1)
        royalty_bps = rng.randint(0, 2500)
        split_bps = rng.randint(0, 5000 - royalty_bps)
        price = rng.randint(1, 10**30)
        _mint(ledger, price=price, royalty={"artist.near": royalty_bps}, splitpayments={"gallery.near": split_bps})
        ledger.set_transaction_fee(CallContext("market.near", 1), rng.randint(0, 5000))

        outcome = ledger.buy(CallContext("bob.near", price), 0)

        paid = [i for i in outcome.transfers if i.kind is not TransferKind.REFUND]
        assert sum(i.amount for i in paid) == price
        assert all(i.amount >= 0 for i in paid)


def test_burn_removes_token_everywhere(ledger: Ledger) -> None:
    _mint(ledger, count=2)
    usage = ledger.state().storage_usage

    outcome = ledger.burn(CallContext("alice.near", 1), 0, art_id="art-7")

    assert outcome.result.art_id == "art-7"
    assert outcome.events[0].to_log()["event"] == "nft_burn"
    assert ledger.tokens_for_owner("alice.near") == [1]
    assert ledger.supply() == (1, 2)
    assert ledger.state().storage_usage < usage
    with pytest.raises(TokenNotFoundError):
        ledger.get_token(0)


def test_burn_twice_fails(ledger: Ledger) -> None:
    _mint(ledger)
    ledger.burn(CallContext("alice.near", 1), 0)
    with pytest.raises(TokenNotFoundError):
        ledger.burn(CallContext("alice.near", 1), 0)


def test_burn_by_non_owner_rejected(ledger: Ledger) -> None:
    _mint(ledger)
    with pytest.raises(UnauthorizedError):
        ledger.burn(CallContext("bob.near", 1), 0)
    assert ledger.get_token(0)[0].owner_id == "alice.near"
    assert ledger.tokens_for_owner("alice.near") == [0]


def test_burn_requires_exactly_one_unit(ledger: Ledger) -> None:
    _mint(ledger)
    with pytest.raises(InsufficientFundsError):
        ledger.burn(CallContext("alice.near", 2), 0)


def test_update_price_lists_token(ledger: Ledger) -> None:
    _mint(ledger, price=None)
    outcome = ledger.update_price(CallContext("alice.near", 1), 0, 500, art_id="art-1")

    assert (outcome.result.new_price, outcome.result.art_id) == (500, "art-1")
    assert ledger.get_token(0)[0].price == 500
    ledger.buy(CallContext("bob.near", 500), 0)


def test_update_price_guards(ledger: Ledger) -> None:
    _mint(ledger)
    with pytest.raises(UnauthorizedError):
        ledger.update_price(CallContext("bob.near", 1), 0, 500)
    with pytest.raises(InsufficientFundsError):
        ledger.update_price(CallContext("alice.near", 0), 0, 500)
    with pytest.raises(LedgerValidationError):
        ledger.update_price(CallContext("alice.near", 1), 0, 0)
    assert ledger.get_token(0)[0].price == 100


def test_transaction_fee_governance(ledger: Ledger) -> None:
    assert ledger.get_transaction_fee(CallContext("market.near", 0)) == 0

    ledger.set_transaction_fee(CallContext("market.near", 1), 300)
    assert ledger.get_transaction_fee(CallContext("market.near", 0)) == 300

    with pytest.raises(UnauthorizedError):
        ledger.set_transaction_fee(CallContext("alice.near", 1), 100)
    with pytest.raises(InsufficientFundsError):
        ledger.set_transaction_fee(CallContext("market.near", 0), 100)
    with pytest.raises(LedgerValidationError):
        ledger.set_transaction_fee(CallContext("market.near", 1), 10_000)
    with pytest.raises(UnauthorizedError):
        ledger.get_transaction_fee(CallContext("alice.near", 0))
    assert ledger.get_transaction_fee(CallContext("market.near", 0)) == 300
