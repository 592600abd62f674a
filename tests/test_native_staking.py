from decimal import Decimal

import pytest

from meshstake.errors import (
    InvalidReplyId,
    InvalidSlashRatio,
    NoFunds,
    NoInstantiateData,
    NonPayable,
    NoProxy,
    NotFound,
    Unauthorized,
)
from meshstake.messages import (
    Coin,
    Delegate,
    Env,
    MessageInfo,
    OwnerByProxyResponse,
    ProxyByOwnerResponse,
    StakeMsg,
    WasmExecute,
    WasmInstantiate,
)
from meshstake.native_staking import (
    REPLY_ID_INSTANTIATE,
    NativeStaking,
    ProcessLocalSlashing,
    ReleaseLocalStake,
    SlashInfo,
    SlashingReason,
)
from meshstake.proxy import NativeStakingProxy

OSMO = "osmo"
VAULT = "vault"
STAKING = "contract1"
DSIGN = Decimal("0.15")
OFFLINE = Decimal("0.10")


def _staking():
    staking = NativeStaking()
    staking.instantiate(Env(STAKING), MessageInfo(VAULT), OSMO, 7, DSIGN, OFFLINE)
    return staking


def _stake_msg(validator):
    return ('{"validator": "%s"}' % validator).encode()


def _stake(staking, user, validator, amount, proxy_addr):
    """Receive stake; on first use instantiate the proxy and run the reply."""
    res = staking.receive_stake(
        Env(STAKING), MessageInfo(VAULT, (Coin(OSMO, amount),)), user, _stake_msg(validator)
    )
    sub = res.messages[0]
    if isinstance(sub.msg, WasmInstantiate):
        proxy = NativeStakingProxy()
        init = sub.msg.msg
        proxy_res = proxy.instantiate(
            Env(proxy_addr),
            MessageInfo(STAKING, sub.msg.funds),
            init["denom"],
            init["owner"],
            init["validator"],
        )
        staking.reply_init_callback(sub.id, proxy_addr, proxy_res.data)
        return res, proxy, proxy_res
    return res, None, None


def test_instantiation():
    staking = _staking()
    assert staking.config().denom == OSMO
    assert staking.config().vault == VAULT
    assert staking.config().proxy_code_id == 7
    assert staking.max_slash().slash_ratio_dsign == DSIGN
    assert staking.max_slash().slash_ratio_offline == OFFLINE


def test_invalid_slash_ratio():
    staking = NativeStaking()
    with pytest.raises(InvalidSlashRatio):
        staking.instantiate(Env(STAKING), MessageInfo(VAULT), OSMO, 1, Decimal("1.01"), OFFLINE)
    with pytest.raises(InvalidSlashRatio):
        staking.instantiate(Env(STAKING), MessageInfo(VAULT), OSMO, 1, DSIGN, Decimal(2))


def test_config_before_instantiate():
    with pytest.raises(NotFound):
        NativeStaking().config()


def test_receiving_stake():
    staking = _staking()
    with pytest.raises(NotFound):
        staking.proxy_by_owner("user1")

    res, proxy, proxy_res = _stake(staking, "user1", "validator1", 100, "contract2")
    sub = res.messages[0]
    assert sub.id == REPLY_ID_INSTANTIATE
    assert sub.reply_on == "success"
    assert sub.msg.admin == STAKING
    assert sub.msg.code_id == 7
    assert sub.msg.label == "LSP for user1"
    assert proxy_res.messages[0].msg == Delegate("validator1", Coin(OSMO, 100))

    assert staking.proxy_by_owner("user1") == ProxyByOwnerResponse("contract2")
    assert staking.owner_by_proxy("contract2") == OwnerByProxyResponse("user1")

    res, _, _ = _stake(staking, "user1", "validator1", 50, "unused")
    assert res.messages[0].msg == WasmExecute(
        "contract2", {"stake": {"validator": "validator1"}}, (Coin(OSMO, 50),)
    )
    assert staking.proxy_by_owner("user1") == ProxyByOwnerResponse("contract2")

    _stake(staking, "user2", "validator1", 10, "contract3")
    assert staking.proxy_by_owner("user2") == ProxyByOwnerResponse("contract3")
    assert staking.owner_by_proxy("contract3") == OwnerByProxyResponse("user2")


def test_receive_stake_accepts_stake_msg():
    staking = _staking()
    res = staking.receive_stake(
        Env(STAKING), MessageInfo(VAULT, (Coin(OSMO, 5),)), "user1", StakeMsg("validator9")
    )
    assert res.messages[0].msg.msg["validator"] == "validator9"


def test_receive_stake_errors():
    staking = _staking()
    with pytest.raises(Unauthorized):
        staking.receive_stake(
            Env(STAKING), MessageInfo("user1", (Coin(OSMO, 5),)), "user1", _stake_msg("v")
        )
    with pytest.raises(NoFunds):
        staking.receive_stake(Env(STAKING), MessageInfo(VAULT), "user1", _stake_msg("v"))


def test_reply_errors():
    staking = _staking()
    with pytest.raises(InvalidReplyId) as err:
        staking.reply_init_callback(5, "contract2", b'{"owner":"user1"}')
    assert err.value.reply_id == 5
    with pytest.raises(NoInstantiateData):
        staking.reply_init_callback(REPLY_ID_INSTANTIATE, "contract2", None)


def test_burn_stake():
    staking = _staking()
    with pytest.raises(NoProxy) as err:
        staking.burn_stake(Env(STAKING), MessageInfo(VAULT), "user1", Coin(OSMO, 10), None)
    assert err.value.owner == "user1"

    _stake(staking, "user1", "validator1", 100, "contract2")
    res = staking.burn_stake(
        Env(STAKING), MessageInfo(VAULT), "user1", Coin(OSMO, 10), "validator1"
    )
    assert res.messages[0].msg == WasmExecute(
        "contract2", {"burn": {"validator": "validator1", "amount": Coin(OSMO, 10)}}
    )
    with pytest.raises(NonPayable):
        staking.burn_stake(
            Env(STAKING), MessageInfo(VAULT, (Coin(OSMO, 1),)), "user1", Coin(OSMO, 10), None
        )
    with pytest.raises(Unauthorized):
        staking.burn_stake(Env(STAKING), MessageInfo("user1"), "user1", Coin(OSMO, 10), None)


def test_releasing_proxy_stake():
    staking = _staking()
    _, proxy, _ = _stake(staking, "user1", "validator1", 100, "contract2")

    released = proxy.release_unbonded(Env("contract2"), MessageInfo("user1"), 100)
    execute = released.messages[0].msg
    assert execute.contract_addr == STAKING

    res = staking.release_proxy_stake(Env(STAKING), MessageInfo("contract2", execute.funds))
    assert res.messages[0].msg == WasmExecute(
        VAULT, ReleaseLocalStake("user1"), (Coin(OSMO, 100),)
    )


def test_release_proxy_stake_errors():
    staking = _staking()
    with pytest.raises(NotFound):
        staking.release_proxy_stake(Env(STAKING), MessageInfo("stranger", (Coin(OSMO, 1),)))
    with pytest.raises(NoFunds):
        staking.release_proxy_stake(Env(STAKING), MessageInfo("stranger"))


def test_jailing_slashes_delegators():
    staking = _staking()
    _stake(staking, "user1", "validator1", 100, "contract2")
    _stake(staking, "user2", "validator1", 40, "contract3")
    amounts = {("contract2", "validator1"): 100, ("contract3", "validator1"): 40}

    def lookup(proxy, validator):
        return amounts.get((proxy, validator))

    res = staking.jailing(None, ["validator1"], lookup)
    assert res.events[0].ty == "jailing"
    assert res.events[0].attributes == [("tombstoned", "validator1")]
    assert res.messages[0].msg == WasmExecute(
        VAULT,
        ProcessLocalSlashing((SlashInfo("user1", 15), SlashInfo("user2", 6)), "validator1"),
    )

    res = staking.jailing(["validator1"], [], lookup)
    assert res.events[0].attributes == [("jailed", "validator1")]
    assert res.messages[0].msg.msg.slashes == (SlashInfo("user1", 10), SlashInfo("user2", 4))


def test_zero_delegation_removes_delegator():
    staking = _staking()
    _stake(staking, "user1", "validator1", 100, "contract2")
    assert staking.handle_slashing("validator1", SlashingReason.OFFLINE, lambda p, v: 0) is None
    msg = staking.handle_slashing("validator1", SlashingReason.OFFLINE, lambda p, v: 100)
    assert msg is None


def test_jailing_without_delegators():
    staking = _staking()
    res = staking.handle_jailing(["a", "b"], ["c"], lambda p, v: 100)
    assert res.messages == []
    assert res.events[0].attributes == [("jailed", "a,b"), ("tombstoned", "c")]
    assert staking.handle_jailing(None, None, lambda p, v: 0).events[0].attributes == []