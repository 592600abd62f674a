from decimal import Decimal

import pytest

from meshstake.errors import MissingDenom, MultipleDenoms, NoFunds, NonPayable
from meshstake.messages import (
    Coin,
    Delegate,
    Event,
    MessageInfo,
    Response,
    SetWithdrawAddress,
    SubMessage,
    Vote,
    VoteOption,
    WeightedVoteOption,
    must_pay,
    nonpayable,
)

OSMO = "uosmo"


def test_must_pay_returns_amount():
    info = MessageInfo("user", (Coin(OSMO, 100),))
    assert must_pay(info, OSMO) == 100


@pytest.mark.parametrize(
    "funds, error",
    [
        ((), NoFunds()),
        ((Coin(OSMO, 0),), NoFunds()),
        ((Coin(OSMO, 1), Coin("star", 1)), MultipleDenoms()),
        ((Coin("star", 5),), MissingDenom(OSMO)),
    ],
)
def test_must_pay_errors(funds, error):
    with pytest.raises(type(error)) as caught:
        must_pay(MessageInfo("user", funds), OSMO)
    assert caught.value == error


def test_nonpayable():
    assert nonpayable(MessageInfo("user")) is None
    with pytest.raises(NonPayable):
        nonpayable(MessageInfo("user", (Coin(OSMO, 1),)))


def test_response_wraps_messages_in_order():
    delegate = Delegate("validator", Coin(OSMO, 100))
    withdraw = SetWithdrawAddress("user")
    res = Response().add_message(delegate).add_messages([withdraw]).set_data(b"data")
    assert [sub.msg for sub in res.messages] == [delegate, withdraw]
    assert res.messages[0] == SubMessage(delegate)
    assert res.data == b"data"


def test_response_submessage_and_event():
    sub = SubMessage(Vote(1, VoteOption.YES), id=2, reply_on="success")
    event = Event("jailing").add_attribute("jailed", "a,b")
    res = Response().add_submessage(sub).add_event(event)
    assert res.messages == [sub]
    assert res.events[0].attributes == [("jailed", "a,b")]


def test_values_compare_by_content():
    option = WeightedVoteOption(VoteOption.YES, Decimal("0.5"))
    assert option == WeightedVoteOption(VoteOption.YES, Decimal("0.5"))
    assert Coin(OSMO, 1) != Coin(OSMO, 2)