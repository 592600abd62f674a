"""Per-user proxy that holds and delegates a user's locally staked tokens."""

from __future__ import annotations

import json
from collections.abc import Iterable

from .errors import InvalidDenom, NotFound, Unauthorized
from .messages import (
    Coin,
    Delegate,
    Delegation,
    Env,
    MessageInfo,
    OwnerMsg,
    ProxyConfig,
    Redelegate,
    ReleaseProxyStake,
    Response,
    SetWithdrawAddress,
    Undelegate,
    Vote,
    VoteOption,
    VoteWeighted,
    WasmExecute,
    WeightedVoteOption,
    WithdrawDelegatorReward,
    must_pay,
    nonpayable,
)


def _validate_addr(addr: str) -> str:
    if not addr or addr != addr.lower() or addr != addr.strip():
        raise ValueError(f"invalid address: {addr!r}")
    return addr


def _owner_data(owner: str) -> bytes:
    return json.dumps({"owner": OwnerMsg(owner).owner}, separators=(",", ":")).encode()


class NativeStakingProxy:
    """Stakes, votes and unbonds on behalf of one owner; created by native staking."""

    def __init__(self) -> None:
        self._config: ProxyConfig | None = None
        self.burned = 0

    def _load_config(self) -> ProxyConfig:
        if self._config is None:
            raise NotFound("config")
        return self._config

    def _require_owner(self, info: MessageInfo) -> ProxyConfig:
        cfg = self._load_config()
        if cfg.owner != info.sender:
            raise Unauthorized()
        return cfg

    @staticmethod
    def _check_denom(cfg: ProxyConfig, amount: Coin) -> None:
        if amount.denom != cfg.denom:
            raise InvalidDenom(amount.denom)

    def instantiate(
        self, env: Env, info: MessageInfo, denom: str, owner: str, validator: str
    ) -> Response:
        """Record the configuration and stake the sent funds on ``validator``.

        The caller becomes the parent contract; the owner receives future rewards.
        """
        cfg = ProxyConfig(denom=denom, owner=_validate_addr(owner), parent=info.sender)
        self._config = cfg
        self.burned = 0
        response = self.stake(env, info, validator)
        return response.add_message(SetWithdrawAddress(cfg.owner)).set_data(_owner_data(owner))

    def stake(self, env: Env, info: MessageInfo, validator: str) -> Response:
        """Delegate the sent funds to ``validator``; parent only."""
        cfg = self._load_config()
        if cfg.parent != info.sender:
            raise Unauthorized()
        amount = must_pay(info, cfg.denom)
        return Response().add_message(Delegate(validator, Coin(cfg.denom, amount)))

    def restake(
        self,
        env: Env,
        info: MessageInfo,
        src_validator: str,
        dst_validator: str,
        amount: Coin,
    ) -> Response:
        """Move ``amount`` of stake from one validator to another; owner only."""
        cfg = self._require_owner(info)
        nonpayable(info)
        self._check_denom(cfg, amount)
        return Response().add_message(Redelegate(src_validator, dst_validator, amount))

    def vote(self, env: Env, info: MessageInfo, proposal_id: int, vote: VoteOption) -> Response:
        """Vote on a proposal with all delegated stake; owner only."""
        self._require_owner(info)
        nonpayable(info)
        return Response().add_message(Vote(proposal_id, vote))

    def vote_weighted(
        self,
        env: Env,
        info: MessageInfo,
        proposal_id: int,
        vote: Iterable[WeightedVoteOption],
    ) -> Response:
        """Cast a weighted vote with all delegated stake; owner only."""
        self._require_owner(info)
        nonpayable(info)
        return Response().add_message(VoteWeighted(proposal_id, tuple(vote)))

    def withdraw_rewards(
        self, env: Env, info: MessageInfo, delegations: Iterable[Delegation]
    ) -> Response:
        """Withdraw rewards of every delegation this proxy holds; owner only."""
        self._require_owner(info)
        nonpayable(info)
        return Response().add_messages(
            WithdrawDelegatorReward(delegation.validator)
            for delegation in delegations
            if delegation.delegator == env.contract_address
        )

    def unstake(self, env: Env, info: MessageInfo, validator: str, amount: Coin) -> Response:
        """Undelegate ``amount`` from ``validator``; owner only."""
        cfg = self._require_owner(info)
        nonpayable(info)
        self._check_denom(cfg, amount)
        return Response().add_message(Undelegate(validator, amount))

    def release_unbonded(self, env: Env, info: MessageInfo, balance: int) -> Response:
        """Send the liquid ``balance``, less burned stake, back to the parent; owner only."""
        cfg = self._require_owner(info)
        nonpayable(info)
        amount = max(balance - self.burned, 0)
        if amount == 0:
            return Response()
        return Response().add_message(
            WasmExecute(
                contract_addr=cfg.parent,
                msg=ReleaseProxyStake(),
                funds=(Coin(cfg.denom, amount),),
            )
        )

    def config(self) -> ProxyConfig:
        return self._load_config()