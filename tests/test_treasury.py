import asyncio
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from nocturne.errors import PermissionDenied, ValidationError
from nocturne.services.access import Role
from nocturne.services.treasury import TreasuryDesk, TreasuryLedger, to_amount
from nocturne.store.kv import BALANCE_KEY, LINKED_CARD_KEY


@pytest.fixture
def ledger(store):
    return TreasuryLedger(store)


@pytest.fixture
def desk(ledger, activity):
    return TreasuryDesk(ledger, activity, latency=0)


def test_credit_credit_link_withdraw(ledger, store):
    ledger.credit("12.50")
    ledger.credit(7.5)
    assert ledger.balance() == Decimal("20.00")
    assert store.get(BALANCE_KEY) == "20.00"

    assert ledger.link_card("4111111111111111") == "1111"
    assert store.get(LINKED_CARD_KEY) != "1111"
    assert ledger.linked_card() == "1111"

    assert ledger.withdraw() == Decimal("20.00")
    assert store.get(BALANCE_KEY) == "0.00"
    assert ledger.balance() == Decimal("0.00")


@pytest.mark.parametrize("a,b,total", [("0.1", "0.2", "0.30"), ("1", "2.005", "3.01"), ("999999.99", "0.01", "1000000.00")])
def test_credits_add_at_cent_precision(ledger, a, b, total):
    ledger.credit(a)
    ledger.credit(b)
    assert ledger.balance() == Decimal(total)


@pytest.mark.parametrize("bad", [0, "0", "-5", "abc", "", "NaN", "Infinity", None, "0.004"])
def test_invalid_amounts_rejected(ledger, bad):
    with pytest.raises(ValidationError):
        ledger.credit(bad)
    assert ledger.balance() == Decimal("0.00")


def test_very_large_amounts_are_credited_exactly(ledger):
    huge = "10000000000000000000000000000"
    assert ledger.credit(huge) == Decimal(huge)
    ledger.credit("0.01")
    assert ledger.balance() == Decimal(huge + ".01")
    assert ledger.withdraw() == Decimal(huge + ".01")


@pytest.mark.parametrize("bad", ["1E+1000000", "-1E+1000000", "1E-1000000"])
def test_amounts_outside_decimal_range_rejected(ledger, bad):
    with pytest.raises(ValidationError):
        ledger.credit(bad)
    assert ledger.balance() == Decimal("0.00")


def test_concurrent_credits_all_land(ledger):
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: ledger.credit("0.25"), range(200)))
    assert ledger.balance() == Decimal("50.00")


def test_to_amount_rounds_half_up():
    assert to_amount("0.005") == Decimal("0.01")
    assert to_amount(3) == Decimal("3.00")


def test_withdraw_on_empty_ledger_is_harmless(ledger):
    assert ledger.withdraw() == Decimal("0.00")
    assert ledger.balance() == Decimal("0.00")


def test_short_card_rejected(ledger, store):
    with pytest.raises(ValidationError):
        ledger.link_card("123")
    assert store.get(LINKED_CARD_KEY) is None
    assert ledger.link_card("4111 1111-1111 4242") == "4242"


def test_card_length_counts_raw_input(ledger):
    assert ledger.link_card("12 3") == "12 3"
    assert ledger.linked_card() == "12 3"


def test_corrupt_card_reads_empty(ledger, store):
    store.set(LINKED_CARD_KEY, "%%%not-base64%%%")
    assert ledger.linked_card() == ""


class TestDesk:
    def test_donation_is_open_to_everyone_and_logged(self, desk, ledger, activity):
        assert asyncio.run(desk.donate("5")) == Decimal("5.00")
        assert ledger.balance() == Decimal("5.00")
        assert activity.list()[0].action == "DONATION"

    def test_huge_donation_is_credited(self, desk, ledger):
        assert asyncio.run(desk.donate("10000000000000000000000000000")) == Decimal("10000000000000000000000000000.00")
        assert desk.statement(Role.OWNER)["balance"] == "10000000000000000000000000000.00"

    def test_invalid_donation_has_no_effect(self, desk, ledger, activity):
        with pytest.raises(ValidationError):
            asyncio.run(desk.donate("-1"))
        assert ledger.balance() == Decimal("0.00")
        assert activity.list() == []

    def test_owner_only_operations(self, desk):
        with pytest.raises(PermissionDenied):
            asyncio.run(desk.link_card(Role.GUEST, "4111111111111111"))
        with pytest.raises(PermissionDenied):
            desk.withdraw(Role.GUEST)
        with pytest.raises(PermissionDenied):
            desk.statement(Role.GUEST)

    def test_withdraw_requires_card_and_funds(self, desk, ledger):
        asyncio.run(desk.donate("10"))
        with pytest.raises(ValidationError):
            desk.withdraw(Role.OWNER)

        asyncio.run(desk.link_card(Role.OWNER, "5555444433332222"))
        assert desk.withdraw(Role.OWNER) == Decimal("10.00")
        assert desk.statement(Role.OWNER) == {"balance": "0.00", "linkedCard": "2222"}

        with pytest.raises(ValidationError):
            desk.withdraw(Role.OWNER)

    def test_simulated_latency_still_completes(self, ledger, activity):
        slow = TreasuryDesk(ledger, activity, latency=0.01)
        asyncio.run(slow.donate("1.25"))
        assert ledger.balance() == Decimal("1.25")
