"""Per-stake and per-validator state of external staking."""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction

from .points_alignment import PointsAlignment


def _mul_floor(amount: int, ratio: Decimal | Fraction | int) -> int:
    return math.floor(Fraction(ratio) * amount)


@dataclass(frozen=True)
class ValueRange:
    """A value that may be anywhere between ``low`` and ``high`` while transactions are pending."""

    low: int
    high: int

    def __post_init__(self) -> None:
        if self.low > self.high:
            raise ValueError(f"invalid range: {self.low} > {self.high}")

    @classmethod
    def new_val(cls, value: int) -> ValueRange:
        return cls(value, value)

    def val(self) -> int | None:
        """The value if the range is settled, otherwise None."""
        return self.low if self.low == self.high else None


@dataclass(frozen=True)
class SlashRatio:
    double_sign: Decimal
    offline: Decimal


@dataclass
class PendingUnbond:
    """Tokens waiting out the unbonding period until ``release_at`` (seconds)."""

    amount: int
    release_at: int


@dataclass
class Stake:
    """Stake of one user on one validator, with its unbonding queue and alignment."""

    stake: ValueRange = field(default_factory=lambda: ValueRange.new_val(0))
    pending_unbonds: list[PendingUnbond] = field(default_factory=list)
    points_alignment: PointsAlignment = field(default_factory=PointsAlignment)
    withdrawn_funds: int = 0

    @classmethod
    def from_amount(cls, amount: int) -> Stake:
        return cls(stake=ValueRange.new_val(amount))

    def release_pending(self, now: int) -> int:
        """Drop unbonds released by ``now`` and return their total amount.

        Unbonds are appended in time order, so the queue is always sorted.
        """
        split = bisect.bisect_right(self.pending_unbonds, now, key=lambda p: p.release_at)
        released = self.pending_unbonds[:split]
        del self.pending_unbonds[:split]
        return sum(pending.amount for pending in released)

    def slash_pending(
        self,
        now: int,
        slash_ratio: Decimal | Fraction | int,
        unbonding_period: int,
        infraction_time: int,
    ) -> int:
        """Slash unbonds started after the infraction and not yet released; return the total."""
        total = 0
        for pending in self.pending_unbonds:
            started = pending.release_at - unbonding_period
            if started > infraction_time and pending.release_at > now:
                slash = _mul_floor(pending.amount, slash_ratio)
                pending.amount -= slash
                total += slash
        return total


@dataclass
class Distribution:
    """Reward distribution bookkeeping of one validator."""

    total_stake: int = 0
    points_per_stake: int = 0
    points_leftover: int = 0