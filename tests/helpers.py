# MIT License
# Copyright (c) 2025 Hashborn

"""Shared constants and builders for the test suite."""

from stakepool.core.ledger import StakeLedger
from stakepool.core.rewards import RewardAccrualEngine
from stakepool.protocol.config.params import UNIT, SECONDS_PER_DAY
from stakepool.protocol.crypto.addresses import address_from_label

DAY = SECONDS_PER_DAY
START = 1_700_000_000

OWNER = address_from_label("owner")
ALICE = address_from_label("alice")
BOB = address_from_label("bob")
CAROL = address_from_label("carol")
DAVE = address_from_label("dave")

STAKERS = (ALICE, BOB, CAROL)
STAKER_FUNDS = 10_000 * UNIT
OWNER_FUNDS = 1_000_000 * UNIT


def at(state, now):
    """Engine and ledger bound to `state` at instant `now`."""
    engine = RewardAccrualEngine(state, now)
    return engine, StakeLedger(state, engine)
