"""Native staking: routes a user's local stake through a per-user proxy."""

from __future__ import annotations

import enum
import json
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction

from .errors import (
    InvalidReplyId,
    InvalidSlashRatio,
    NoInstantiateData,
    NoProxy,
    NotFound,
    Unauthorized,
)
from .messages import (
    Coin,
    Env,
    Event,
    MessageInfo,
    NativeStakingConfig,
    OwnerByProxyResponse,
    OwnerMsg,
    ProxyByOwnerResponse,
    Response,
    SlashRatioResponse,
    StakeMsg,
    SubMessage,
    WasmExecute,
    WasmInstantiate,
    must_pay,
    nonpayable,
)

REPLY_ID_INSTANTIATE = 2

DelegationLookup = Callable[[str, str], "int | None"]
"""Returns the amount ``proxy`` has delegated to ``validator`` (None if nothing)."""


class SlashingReason(enum.Enum):
    OFFLINE = "offline"
    DOUBLE_SIGN = "double_sign"


@dataclass(frozen=True)
class SlashInfo:
    user: str
    slash: int


@dataclass(frozen=True)
class ProcessLocalSlashing:
    """Asks the vault to slash the collateral of the listed users."""

    slashes: tuple[SlashInfo, ...]
    validator: str


@dataclass(frozen=True)
class ReleaseLocalStake:
    """Returns released tokens (sent as funds) to the vault for ``owner``."""

    owner: str


def _validate_addr(addr: str) -> str:
    if not addr or addr != addr.lower() or addr != addr.strip():
        raise ValueError(f"invalid address: {addr!r}")
    return addr


def _parse_json(data: bytes | str) -> dict:
    parsed = json.loads(data)
    if not isinstance(parsed, dict):
        raise ValueError("expected a JSON object")
    return parsed


def _parse_stake_msg(msg: StakeMsg | bytes | str) -> StakeMsg:
    if isinstance(msg, StakeMsg):
        return msg
    return StakeMsg(validator=_parse_json(msg)["validator"])


class NativeStaking:
    """Receives local stake from the vault and manages one proxy per owner."""

    def __init__(self) -> None:
        self._config: NativeStakingConfig | None = None
        self._proxy_by_owner: dict[str, str] = {}
        self._owner_by_proxy: dict[str, str] = {}
        self._delegators: dict[str, set[str]] = {}

    def _load_config(self) -> NativeStakingConfig:
        if self._config is None:
            raise NotFound("config")
        return self._config

    def _require_vault(self, info: MessageInfo) -> NativeStakingConfig:
        cfg = self._load_config()
        if cfg.vault != info.sender:
            raise Unauthorized()
        return cfg

    def instantiate(
        self,
        env: Env,
        info: MessageInfo,
        denom: str,
        proxy_code_id: int,
        slash_ratio_dsign: Decimal,
        slash_ratio_offline: Decimal,
    ) -> Response:
        """Record the configuration; the caller is the vault."""
        if slash_ratio_dsign > 1 or slash_ratio_offline > 1:
            raise InvalidSlashRatio()
        self._config = NativeStakingConfig(
            denom=denom,
            proxy_code_id=proxy_code_id,
            vault=info.sender,
            slash_ratio_dsign=slash_ratio_dsign,
            slash_ratio_offline=slash_ratio_offline,
        )
        return Response()

    def handle_jailing(
        self,
        jailed: Iterable[str] | None,
        tombstoned: Iterable[str] | None,
        delegation_of: DelegationLookup,
    ) -> Response:
        """Slash delegators of tombstoned (double sign) and jailed (offline) validators."""
        jailed = list(jailed or ())
        tombstoned = list(tombstoned or ())
        self._load_config()
        msgs = []
        for validator in tombstoned:
            msg = self.handle_slashing(validator, SlashingReason.DOUBLE_SIGN, delegation_of)
            if msg is not None:
                msgs.append(msg)
        for validator in jailed:
            msg = self.handle_slashing(validator, SlashingReason.OFFLINE, delegation_of)
            if msg is not None:
                msgs.append(msg)
        event = Event("jailing")
        if jailed:
            event.add_attribute("jailed", ",".join(jailed))
        if tombstoned:
            event.add_attribute("tombstoned", ",".join(tombstoned))
        return Response().add_event(event).add_messages(msgs)

    def handle_slashing(
        self, validator: str, reason: SlashingReason, delegation_of: DelegationLookup
    ) -> WasmExecute | None:
        """Build the vault slashing message for everyone delegating to ``validator``."""
        cfg = self._load_config()
        ratio = (
            cfg.slash_ratio_offline
            if reason is SlashingReason.OFFLINE
            else cfg.slash_ratio_dsign
        )
        owners = sorted(self._delegators.get(validator, ()))
        slashes = []
        for owner in owners:
            proxy = self._proxy_by_owner.get(owner)
            if proxy is None:
                raise NotFound(f"proxy of {owner}")
            delegation = delegation_of(proxy, validator) or 0
            if delegation == 0:
                self._remove_delegator(validator, owner)
                continue
            slashes.append(SlashInfo(owner, math.floor(Fraction(ratio) * delegation)))
        if not slashes:
            return None
        return WasmExecute(
            contract_addr=cfg.vault,
            msg=ProcessLocalSlashing(tuple(slashes), validator),
        )

    def _remove_delegator(self, validator: str, owner: str) -> None:
        owners = self._delegators.get(validator)
        if owners is None:
            return
        owners.discard(owner)
        if not owners:
            del self._delegators[validator]

    def reply_init_callback(
        self, reply_id: int, contract_address: str, data: bytes | None
    ) -> Response:
        """Associate a freshly instantiated proxy with the owner named in its data."""
        if reply_id != REPLY_ID_INSTANTIATE:
            raise InvalidReplyId(reply_id)
        if data is None:
            raise NoInstantiateData()
        owner_msg = OwnerMsg(owner=_parse_json(data)["owner"])
        owner = _validate_addr(owner_msg.owner)
        self._proxy_by_owner[owner] = contract_address
        self._owner_by_proxy[contract_address] = owner
        return Response()

    def proxy_by_owner(self, owner: str) -> ProxyByOwnerResponse:
        owner = _validate_addr(owner)
        proxy = self._proxy_by_owner.get(owner)
        if proxy is None:
            raise NotFound(f"proxy of {owner}")
        return ProxyByOwnerResponse(proxy=proxy)

    def owner_by_proxy(self, proxy: str) -> OwnerByProxyResponse:
        proxy = _validate_addr(proxy)
        owner = self._owner_by_proxy.get(proxy)
        if owner is None:
            raise NotFound(f"owner of {proxy}")
        return OwnerByProxyResponse(owner=owner)

    def receive_stake(
        self, env: Env, info: MessageInfo, owner: str, msg: StakeMsg | bytes | str
    ) -> Response:
        """Stake the sent funds for ``owner``, creating its proxy on first use; vault only."""
        cfg = self._require_vault(info)
        must_pay(info, cfg.denom)
        validator = _parse_stake_msg(msg).validator
        owner_addr = _validate_addr(owner)
        self._delegators.setdefault(validator, set()).add(owner_addr)

        proxy = self._proxy_by_owner.get(owner_addr)
        if proxy is None:
            instantiate = WasmInstantiate(
                admin=env.contract_address,
                code_id=cfg.proxy_code_id,
                msg={"denom": cfg.denom, "owner": owner, "validator": validator},
                funds=info.funds,
                label=f"LSP for {owner}",
            )
            return Response().add_submessage(
                SubMessage(instantiate, id=REPLY_ID_INSTANTIATE, reply_on="success")
            )
        return Response().add_message(
            WasmExecute(
                contract_addr=proxy,
                msg={"stake": {"validator": validator}},
                funds=info.funds,
            )
        )

    def burn_stake(
        self,
        env: Env,
        info: MessageInfo,
        owner: str,
        amount: Coin,
        validator: str | None,
    ) -> Response:
        """Ask ``owner``'s proxy to burn ``amount``; vault only."""
        self._require_vault(info)
        nonpayable(info)
        owner_addr = _validate_addr(owner)
        proxy = self._proxy_by_owner.get(owner_addr)
        if proxy is None:
            raise NoProxy(owner)
        return Response().add_message(
            WasmExecute(
                contract_addr=proxy,
                msg={"burn": {"validator": validator, "amount": amount}},
                funds=info.funds,
            )
        )

    def max_slash(self) -> SlashRatioResponse:
        cfg = self._load_config()
        return SlashRatioResponse(
            slash_ratio_dsign=cfg.slash_ratio_dsign,
            slash_ratio_offline=cfg.slash_ratio_offline,
        )

    def release_proxy_stake(self, env: Env, info: MessageInfo) -> Response:
        """Forward tokens a proxy releases back to the vault for the proxy's owner."""
        cfg = self._load_config()
        must_pay(info, cfg.denom)
        owner = self._owner_by_proxy.get(info.sender)
        if owner is None:
            raise NotFound(f"owner of {info.sender}")
        return Response().add_message(
            WasmExecute(
                contract_addr=cfg.vault,
                msg=ReleaseLocalStake(owner),
                funds=info.funds,
            )
        )

    def jailing(
        self,
        jailed: Iterable[str] | None,
        tombstoned: Iterable[str] | None,
        delegation_of: DelegationLookup,
    ) -> Response:
        """Privileged entry point called on validator set changes that imply slashing."""
        return self.handle_jailing(jailed, tombstoned, delegation_of)

    def config(self) -> NativeStakingConfig:
        return self._load_config()