# MIT License
# Copyright (c) 2025 Hashborn

"""
Tests for the stake ledger state machine (NoRequest -> PendingCooldown -> Withdrawable).
"""

import pytest

from stakepool.core.state import PoolState
from stakepool.protocol.config.params import UNIT
from stakepool.protocol.types.common import (
    ZeroAmount,
    InsufficientStake,
    NoRequest,
    CooldownActive,
    NoReward,
)

from helpers import DAY, START, OWNER, ALICE, BOB, at


@pytest.fixture
def state():
    return PoolState(owner=OWNER, cooldown_period=DAY)


def test_stake_creates_record_and_updates_totals(state):
    _, ledger = at(state, START)
    assert not state.has_account(ALICE)

    ledger.stake(ALICE, 100 * UNIT)
    ledger.stake(ALICE, 20 * UNIT)
    ledger.stake(BOB, 5 * UNIT)

    assert state.get_account(ALICE).staked_amount == 120 * UNIT
    assert state.get_account(BOB).staked_amount == 5 * UNIT
    assert state.total_staked == 125 * UNIT
    assert state.sum_staked() == state.total_staked


def test_stake_zero_rejected(state):
    _, ledger = at(state, START)
    with pytest.raises(ZeroAmount):
        ledger.stake(ALICE, 0)


def test_request_unstake_validation(state):
    _, ledger = at(state, START)
    ledger.stake(ALICE, 100 * UNIT)

    with pytest.raises(ZeroAmount):
        ledger.request_unstake(ALICE, 0)
    with pytest.raises(InsufficientStake):
        ledger.request_unstake(ALICE, 100 * UNIT + 1)
    with pytest.raises(InsufficientStake):
        ledger.request_unstake(BOB, 1)


def test_second_request_overwrites_first(state):
    _, ledger = at(state, START)
    ledger.stake(ALICE, 100 * UNIT)
    ledger.request_unstake(ALICE, 70 * UNIT)

    _, ledger = at(state, START + DAY // 2)
    ledger.request_unstake(ALICE, 30 * UNIT)

    acc = state.get_account(ALICE)
    assert acc.unstake_request_amount == 30 * UNIT
    assert acc.unstake_request_time == START + DAY // 2

    # Timer restarted with the second request
    _, ledger = at(state, START + DAY)
    with pytest.raises(CooldownActive):
        ledger.withdraw(ALICE)


def test_withdraw_without_request(state):
    _, ledger = at(state, START)
    ledger.stake(ALICE, 100 * UNIT)
    with pytest.raises(NoRequest):
        ledger.withdraw(ALICE)


def test_request_states_over_time(state):
    _, ledger = at(state, START)
    ledger.stake(ALICE, 100 * UNIT)

    info = ledger.get_stake_info(ALICE)
    assert (info.request_amount, info.request_time, info.withdrawable) == (0, 0, False)

    ledger.request_unstake(ALICE, 40 * UNIT)
    info = ledger.get_stake_info(ALICE)
    assert info.request_amount == 40 * UNIT
    assert info.request_time == START
    assert info.withdrawable is False

    _, ledger = at(state, START + DAY - 1)
    assert ledger.get_stake_info(ALICE).withdrawable is False

    _, ledger = at(state, START + DAY)
    assert ledger.get_stake_info(ALICE).withdrawable is True

    assert ledger.withdraw(ALICE) == 40 * UNIT
    info = ledger.get_stake_info(ALICE)
    assert (info.staked_amount, info.request_amount, info.request_time, info.withdrawable) == (60 * UNIT, 0, 0, False)
    assert state.total_staked == 60 * UNIT


def test_withdraw_guards_stake_below_request(state):
    _, ledger = at(state, START)
    ledger.stake(ALICE, 100 * UNIT)
    ledger.request_unstake(ALICE, 80 * UNIT)

    # Force the inconsistent record the guard protects against
    acc = state.get_account(ALICE)
    acc.staked_amount = 50 * UNIT
    state.set_account(acc)
    state.total_staked = 50 * UNIT

    _, ledger = at(state, START + DAY)
    with pytest.raises(InsufficientStake):
        ledger.withdraw(ALICE)


def test_record_persists_after_full_withdraw(state):
    _, ledger = at(state, START)
    ledger.stake(ALICE, 10 * UNIT)
    ledger.request_unstake(ALICE, 10 * UNIT)

    _, ledger = at(state, START + DAY)
    ledger.withdraw(ALICE)

    assert state.has_account(ALICE)
    assert state.get_account(ALICE).staked_amount == 0
    assert state.total_staked == 0


def test_claim_requires_reward(state):
    _, ledger = at(state, START)
    ledger.stake(ALICE, 100 * UNIT)
    with pytest.raises(NoReward):
        ledger.claim_reward(ALICE)


def test_claim_zeroes_accrued_and_tracks_paid(state):
    _, ledger = at(state, START)
    ledger.stake(ALICE, 100 * UNIT)
    engine, _ = at(state, START)
    engine.add_reward(1000 * UNIT, 10 * DAY)

    engine, ledger = at(state, START + 2 * DAY)
    owed = engine.earned(ALICE)
    assert ledger.claim_reward(ALICE) == owed
    assert state.get_account(ALICE).accrued_reward == 0
    assert state.total_reward_paid == owed
    assert engine.earned(ALICE) == 0


def test_unstake_request_keeps_earning(state):
    _, ledger = at(state, START)
    ledger.stake(ALICE, 100 * UNIT)
    ledger.request_unstake(ALICE, 100 * UNIT)
    engine, _ = at(state, START)
    engine.add_reward(1000 * UNIT, 10 * DAY)

    engine, _ = at(state, START + DAY)
    assert engine.earned(ALICE) > 0
