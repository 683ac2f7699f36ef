# nocturne/services/treasury.py
"""
Simulated treasury.

Nothing here touches a payment gateway. The linked card is kept as the last
four characters in base64: an obfuscation placeholder, not encryption.
"""
from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from nocturne.errors import ValidationError
from nocturne.services.access import Role, ensure_owner
from nocturne.services.activity import ActivityLog
from nocturne.store.kv import BALANCE_KEY, LINKED_CARD_KEY, KeyValueStore

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def _to_cents(value: Decimal) -> Decimal:
    """Round to cents in a context wide enough for every integer digit."""
    with localcontext() as ctx:
        if value.adjusted() > ctx.Emax:
            raise InvalidOperation(value)
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _add_cents(a: Decimal, b: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, max(a.adjusted(), b.adjusted()) + 4)
        return a + b


def to_amount(value) -> Decimal:
    """Parse a positive, finite amount rounded to cents. No upper bound."""
    try:
        amount = Decimal(str(value).strip())
        if not amount.is_finite():
            raise InvalidOperation(value)
        amount = _to_cents(amount)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError("Please enter a valid amount.") from None
    if amount <= 0:
        raise ValidationError("Please enter a valid amount.")
    return amount


def card_last4(raw_number: str) -> str:
    """Last four characters of the input as typed; anything shorter is refused."""
    number = raw_number or ""
    if len(number) < 4:
        raise ValidationError("Please enter a valid card number.")
    return number[-4:]


def _encode_card(last4: str) -> str:
    return base64.b64encode(last4.encode("utf-8")).decode("ascii")


def _decode_card(encoded: str) -> str:
    try:
        return base64.b64decode(encoded.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return ""


class TreasuryLedger:
    """Balance plus linked card. No guards beyond input validation."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def balance(self) -> Decimal:
        raw = self._store.get(BALANCE_KEY)
        if not raw:
            return ZERO
        return _to_cents(Decimal(raw))

    def credit(self, amount) -> Decimal:
        value = to_amount(amount)
        with self._store.lock:
            new_balance = _add_cents(self.balance(), value)
            self._store.set(BALANCE_KEY, f"{new_balance:.2f}")
        return new_balance

    def withdraw(self) -> Decimal:
        """Zero the balance; returns what was there."""
        with self._store.lock:
            previous = self.balance()
            self._store.set(BALANCE_KEY, f"{ZERO:.2f}")
        return previous

    def linked_card(self) -> str:
        encoded = self._store.get(LINKED_CARD_KEY)
        if not encoded:
            return ""
        return _decode_card(encoded)

    def link_card(self, raw_number: str) -> str:
        last4 = card_last4(raw_number)
        self._store.set(LINKED_CARD_KEY, _encode_card(last4))
        return last4


class TreasuryDesk:
    """
    Role-aware front of the ledger. Donations and card linking wait out a
    simulated network delay before touching state.
    """

    def __init__(self, ledger: TreasuryLedger, activity: ActivityLog, latency: float = 0.0):
        self._ledger = ledger
        self._activity = activity
        self._latency = latency

    async def _simulate_network(self) -> None:
        if self._latency > 0:
            await asyncio.sleep(self._latency)

    async def donate(self, amount) -> Decimal:
        value = to_amount(amount)
        await self._simulate_network()
        balance = self._ledger.credit(value)
        self._activity.append("DONATION", f"Offering of ${value:.2f} received")
        logger.info("Donation of %s accepted", value)
        return balance

    async def link_card(self, role: Role, raw_number: str) -> str:
        ensure_owner(role, "card link")
        card_last4(raw_number)
        await self._simulate_network()
        last4 = self._ledger.link_card(raw_number)
        self._activity.append("CARD_LINK", f"Payout card ending in {last4} linked")
        logger.info("Payout card linked")
        return last4

    def withdraw(self, role: Role) -> Decimal:
        ensure_owner(role, "withdraw")
        card = self._ledger.linked_card()
        if not card:
            raise ValidationError("Link a payout card before withdrawing.")
        if self._ledger.balance() <= 0:
            raise ValidationError("There is nothing to withdraw.")
        amount = self._ledger.withdraw()
        self._activity.append("WITHDRAW", f"${amount:.2f} sent to card ending in {card}")
        logger.info("Withdrew %s", amount)
        return amount

    def statement(self, role: Role) -> dict:
        ensure_owner(role, "treasury view")
        return {
            "balance": f"{self._ledger.balance():.2f}",
            "linkedCard": self._ledger.linked_card(),
        }
