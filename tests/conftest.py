# MIT License
# Copyright (c) 2025 Hashborn

import pytest

from stakepool.core.assets import InMemoryAsset
from stakepool.core.clock import ManualClock
from stakepool.core.events import EventBus
from stakepool.core.pool import StakingPool, DEFAULT_POOL_ADDRESS

from helpers import DAY, START, OWNER, STAKERS, STAKER_FUNDS, OWNER_FUNDS


@pytest.fixture
def clock():
    return ManualClock(START)


@pytest.fixture
def stake_token():
    token = InMemoryAsset("stk", DEFAULT_POOL_ADDRESS)
    for addr in STAKERS:
        token.mint(addr, STAKER_FUNDS)
        token.approve(addr, STAKER_FUNDS)
    return token


@pytest.fixture
def reward_token():
    token = InMemoryAsset("rwd", DEFAULT_POOL_ADDRESS)
    token.mint(OWNER, OWNER_FUNDS)
    token.approve(OWNER, OWNER_FUNDS)
    return token


@pytest.fixture
def bus():
    bus = EventBus()
    yield bus
    bus.clear()


@pytest.fixture
def pool(stake_token, reward_token, clock, bus):
    """Pool with a one-day cooldown and funded stakers."""
    return StakingPool(stake_token, reward_token, OWNER, cooldown_period=DAY, clock=clock, events=bus)
