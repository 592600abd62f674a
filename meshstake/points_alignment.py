"""Signed correction of distribution points caused by stake changes."""

from __future__ import annotations

from dataclasses import dataclass

U256_MAX = (1 << 256) - 1
_HALF = U256_MAX >> 1


def _check_u256(value: int) -> int:
    if not 0 <= value <= U256_MAX:
        raise OverflowError("value does not fit in 256 unsigned bits")
    return value


@dataclass
class PointsAlignment:
    """How many points to add to or remove from those computed for a staker.

    The offset is kept within the range of a 256-bit value shifted by half its
    maximum, so every aligned result is itself a 256-bit unsigned value.
    """

    offset: int = 0

    def __post_init__(self) -> None:
        self._set(self.offset)

    def _set(self, offset: int) -> None:
        if not -_HALF <= offset <= U256_MAX - _HALF:
            raise OverflowError("points alignment out of range")
        self.offset = offset

    def align(self, points: int) -> int:
        """Return ``points`` corrected by the alignment."""
        return _check_u256(_check_u256(points) + self.offset)

    def stake_increased(self, amount: int, pps: int) -> None:
        """Account for ``amount`` just staked at ``pps`` points per stake."""
        self._set(self.offset - _check_u256(amount * pps))

    def stake_decreased(self, amount: int, pps: int) -> None:
        """Account for ``amount`` just unstaked at ``pps`` points per stake."""
        self._set(self.offset + _check_u256(amount * pps))