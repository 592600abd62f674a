"""Storage of stakes keyed by user and validator, indexed by validator."""

from __future__ import annotations

from .errors import NotFound
from .stake_state import Stake


class Stakes:
    """Stakes of every ``(user, validator)`` pair, queryable from either side."""

    def __init__(self) -> None:
        self._items: dict[tuple[str, str], Stake] = {}
        self._by_validator: dict[str, set[str]] = {}

    def save(self, user: str, validator: str, stake: Stake) -> None:
        self._items[(user, validator)] = stake
        self._by_validator.setdefault(validator, set()).add(user)

    def load(self, user: str, validator: str) -> Stake:
        stake = self.may_load(user, validator)
        if stake is None:
            raise NotFound(f"stake of {user} on {validator}")
        return stake

    def may_load(self, user: str, validator: str) -> Stake | None:
        return self._items.get((user, validator))

    def remove(self, user: str, validator: str) -> None:
        if self._items.pop((user, validator), None) is None:
            return
        users = self._by_validator[validator]
        users.discard(user)
        if not users:
            del self._by_validator[validator]

    def stakes_by_user(self, user: str) -> list[tuple[str, Stake]]:
        """All ``(validator, stake)`` pairs of ``user``, by validator ascending."""
        return sorted(
            ((validator, stake) for (owner, validator), stake in self._items.items() if owner == user),
            key=lambda item: item[0],
        )

    def stakes_by_validator(self, validator: str) -> list[tuple[str, Stake]]:
        """All ``(user, stake)`` pairs on ``validator``, by user ascending."""
        return [
            (user, self._items[(user, validator)])
            for user in sorted(self._by_validator.get(validator, ()))
        ]