# meshstake

In-memory state machines for the provider side of mesh security staking.
Each contract object keeps its own state and answers calls with a
`Response` that lists the messages it would dispatch. Errors are raised as
subclasses of `meshstake.errors.ContractError`.

## Modules

- `meshstake.native_staking` – `NativeStaking` receives stake from the vault
  on behalf of users (`receive_stake`), creates one proxy per user through an
  instantiate sub-message with reply id `REPLY_ID_INSTANTIATE`, records the
  pairing in `reply_init_callback`, and answers `proxy_by_owner`,
  `owner_by_proxy`, `max_slash` and `config`. `burn_stake` forwards a burn
  request to the user's proxy, and `release_proxy_stake` returns tokens sent
  by a proxy to the vault as a `ReleaseLocalStake` message. `jailing` /
  `handle_jailing` turn tombstoned validators (double-sign ratio) and jailed
  validators (offline ratio) into `ProcessLocalSlashing` messages for the
  vault, listing a `SlashInfo` per delegating user.
- `meshstake.proxy` – `NativeStakingProxy`, a per-user proxy. Its parent may
  `stake`; its owner may `restake`, `unstake`, `vote`, `vote_weighted`,
  `withdraw_rewards` and `release_unbonded` (which sends the liquid balance,
  less the `burned` amount, back to the parent).
- `meshstake.stake_state` – `ValueRange`, `SlashRatio`, `PendingUnbond`,
  `Stake` (with `release_pending` and `slash_pending`) and `Distribution`.
- `meshstake.stakes` – `Stakes`, a store keyed by `(user, validator)` with
  `stakes_by_user` and `stakes_by_validator`, both in ascending order.
- `meshstake.points_alignment` – `PointsAlignment`, the signed correction
  applied to reward points when a stake grows or shrinks, kept within 256-bit
  bounds.
- `meshstake.messages` – `Coin`, staking, governance and wasm message types,
  `Response`, `Event`, `MessageInfo`, `Env`, configuration records, and the
  `must_pay` / `nonpayable` payment checks.
- `meshstake.errors` – `ContractError` and its subclasses, such as
  `Unauthorized`, `InvalidDenom`, `NoProxy`, `InvalidSlashRatio` and
  `NotFound`.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Example

```python
from decimal import Decimal

from meshstake.messages import Coin, Env, MessageInfo, StakeMsg
from meshstake.native_staking import NativeStaking

env = Env(contract_address="staking")
staking = NativeStaking()
staking.instantiate(env, MessageInfo(sender="vault"), "uosmo", 2,
                    Decimal("0.15"), Decimal("0.10"))

response = staking.receive_stake(
    env,
    MessageInfo(sender="vault", funds=(Coin("uosmo", 100),)),
    "user1",
    StakeMsg(validator="validator1"),
)
```

The first stake for a user yields a sub-message that instantiates that
user's proxy. Once the reply is passed to
`reply_init_callback(2, proxy_address, data)` — where `data` is the JSON
`{"owner": ...}` a proxy's `instantiate` returns — `proxy_by_owner` and
`owner_by_proxy` return the pairing, and later stakes go straight to the
existing proxy.

## What this package does not do

- It runs no chain and dispatches nothing: messages in a `Response` are only
  described, and nothing executes them.
- State lives in memory only; there is no persistent storage.
- Chain queries are supplied by the caller: slashing takes a
  `delegation_of(proxy, validator)` function, `withdraw_rewards` takes the
  list of delegations, and `release_unbonded` takes the liquid balance.
- `NativeStakingProxy` has no burn call; `burned` stays at zero unless set.
- There is no external staking contract, vault or reward distribution logic;
  only the stake records and points alignment it would use are provided.