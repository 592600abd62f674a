"""Errors raised by the staking contracts."""

from __future__ import annotations


class ContractError(Exception):
    """Base class of every error a contract call can raise.

    Two errors are equal when they are of the same type and carry the same values.
    """

    message = "contract error"

    def __str__(self) -> str:
        return self.message.format(*self.args)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContractError):
            return NotImplemented
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class PaymentError(ContractError):
    """The funds sent along with a call are not what the call expects."""

    message = "payment error"


class NonPayable(PaymentError):
    message = "This message does not accept funds"


class NoFunds(PaymentError):
    message = "No funds sent"


class MissingDenom(PaymentError):
    message = "Must send '{0}' to cover this"

    def __init__(self, denom: str) -> None:
        super().__init__(denom)
        self.denom = denom


class ExtraDenom(PaymentError):
    message = "Received unsupported denom '{0}'"

    def __init__(self, denom: str) -> None:
        super().__init__(denom)
        self.denom = denom


class MultipleDenoms(PaymentError):
    message = "Sent more than one denomination"


class Unauthorized(ContractError):
    message = "Unauthorized"


class InvalidDenom(ContractError):
    message = "Try to send wrong denom: {0}"

    def __init__(self, denom: str) -> None:
        super().__init__(denom)
        self.denom = denom


class InsufficientDelegation(ContractError):
    message = "Validator {0} has not enough delegated funds: {1}"

    def __init__(self, validator: str, amount: int) -> None:
        super().__init__(validator, amount)
        self.validator = validator
        self.amount = amount


class InsufficientDelegations(ContractError):
    message = "Native proxy {0} has not enough delegated funds: {1}"

    def __init__(self, proxy: str, amount: int) -> None:
        super().__init__(proxy, amount)
        self.proxy = proxy
        self.amount = amount


class InvalidReplyId(ContractError):
    message = "Invalid reply id: {0}"

    def __init__(self, reply_id: int) -> None:
        super().__init__(reply_id)
        self.reply_id = reply_id


class NoInstantiateData(ContractError):
    message = "Missing instantiate reply data"


class NoProxy(ContractError):
    message = "Missing proxy contract for {0}"

    def __init__(self, owner: str) -> None:
        super().__init__(owner)
        self.owner = owner


class InvalidSlashRatio(ContractError):
    message = "You cannot specify a slash ratio over 1.0 (100%)"


class NotFound(ContractError):
    """A value looked up in contract storage does not exist."""

    message = "{0} not found"

    def __init__(self, what: str) -> None:
        super().__init__(what)
        self.what = what