"""Messages, responses and configuration records exchanged by the contracts."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from .errors import MissingDenom, MultipleDenoms, NoFunds, NonPayable


@dataclass(frozen=True)
class Coin:
    denom: str
    amount: int


class VoteOption(enum.Enum):
    YES = "yes"
    NO = "no"
    ABSTAIN = "abstain"
    NO_WITH_VETO = "no_with_veto"


@dataclass(frozen=True)
class WeightedVoteOption:
    option: VoteOption
    weight: Decimal


@dataclass(frozen=True)
class Delegate:
    validator: str
    amount: Coin


@dataclass(frozen=True)
class Undelegate:
    validator: str
    amount: Coin


@dataclass(frozen=True)
class Redelegate:
    src_validator: str
    dst_validator: str
    amount: Coin


@dataclass(frozen=True)
class SetWithdrawAddress:
    address: str


@dataclass(frozen=True)
class WithdrawDelegatorReward:
    validator: str


@dataclass(frozen=True)
class Vote:
    proposal_id: int
    vote: VoteOption


@dataclass(frozen=True)
class VoteWeighted:
    proposal_id: int
    options: tuple[WeightedVoteOption, ...]


@dataclass(frozen=True)
class WasmExecute:
    contract_addr: str
    msg: Any
    funds: tuple[Coin, ...] = ()


@dataclass(frozen=True)
class WasmInstantiate:
    admin: str | None
    code_id: int
    msg: Any
    funds: tuple[Coin, ...]
    label: str


@dataclass(frozen=True)
class SubMessage:
    """A message wrapped with its reply handling: ``"never"`` or ``"success"``."""

    msg: Any
    id: int = 0
    reply_on: str = "never"


@dataclass
class Event:
    ty: str
    attributes: list[tuple[str, str]] = field(default_factory=list)

    def add_attribute(self, key: str, value: str) -> Event:
        self.attributes.append((key, value))
        return self


@dataclass
class Response:
    """What a contract call returns: messages to dispatch, events and data."""

    messages: list[SubMessage] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    data: bytes | None = None

    def add_message(self, msg: Any) -> Response:
        self.messages.append(SubMessage(msg))
        return self

    def add_messages(self, msgs: Any) -> Response:
        self.messages.extend(SubMessage(msg) for msg in msgs)
        return self

    def add_submessage(self, sub_msg: SubMessage) -> Response:
        self.messages.append(sub_msg)
        return self

    def add_event(self, event: Event) -> Response:
        self.events.append(event)
        return self

    def set_data(self, data: bytes) -> Response:
        self.data = data
        return self


@dataclass(frozen=True)
class MessageInfo:
    sender: str
    funds: tuple[Coin, ...] = ()


@dataclass(frozen=True)
class Env:
    contract_address: str
    height: int = 0
    time: int = 0


@dataclass(frozen=True)
class Delegation:
    delegator: str
    validator: str
    amount: Coin


@dataclass(frozen=True)
class OwnerMsg:
    """Carried in a proxy's instantiate data, naming the proxy's owner."""

    owner: str


@dataclass(frozen=True)
class StakeMsg:
    """Opaque payload of ``receive_stake``: the validator to stake on."""

    validator: str


@dataclass(frozen=True)
class ReleaseProxyStake:
    """Sent by a proxy to native staking with the tokens it releases."""


@dataclass(frozen=True)
class ProxyConfig:
    denom: str
    owner: str
    parent: str


@dataclass(frozen=True)
class NativeStakingConfig:
    denom: str
    proxy_code_id: int
    vault: str
    slash_ratio_dsign: Decimal
    slash_ratio_offline: Decimal


@dataclass(frozen=True)
class ProxyByOwnerResponse:
    proxy: str


@dataclass(frozen=True)
class OwnerByProxyResponse:
    owner: str


@dataclass(frozen=True)
class SlashRatioResponse:
    slash_ratio_dsign: Decimal
    slash_ratio_offline: Decimal


def must_pay(info: MessageInfo, denom: str) -> int:
    """Return the amount sent, requiring exactly one non-zero coin of ``denom``."""
    if not info.funds:
        raise NoFunds()
    if len(info.funds) > 1:
        raise MultipleDenoms()
    (coin,) = info.funds
    if coin.amount == 0:
        raise NoFunds()
    if coin.denom != denom:
        raise MissingDenom(denom)
    return coin.amount


def nonpayable(info: MessageInfo) -> None:
    """Raise if any funds were sent."""
    if info.funds:
        raise NonPayable()