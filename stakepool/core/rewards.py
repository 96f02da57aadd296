# MIT License
# Copyright (c) 2025 Hashborn

"""
Reward accrual engine.

Rewards stream at `reward_rate` units per second until `period_finish` and
are shared pro rata by stake. Instead of crediting every account on every
tick, a global accumulator (`reward_per_token_stored`, scaled by PRECISION)
grows with elapsed time, and each account snapshots it on settlement:

    earned = staked * (reward_per_token - reward_per_token_paid) / PRECISION + accrued

Every division truncates. The only rounding losses are the rate itself
(at most duration - 1 units per period) and the per-settlement accumulator
step; nothing else rounds.
"""

import logging
from typing import Optional
from .state import PoolState
from ..protocol.config.params import PRECISION
from ..protocol.types.common import ZeroAmount, RateTooLow

logger = logging.getLogger(__name__)


class RewardAccrualEngine:
    def __init__(self, state: PoolState, now: int):
        self.state = state
        self.now = now

    def last_time_reward_applicable(self) -> int:
        return min(self.now, self.state.reward.period_finish)

    def reward_per_token(self) -> int:
        """Projects the accumulator to now. Does not mutate state."""
        reward = self.state.reward
        if self.state.total_staked == 0:
            return reward.reward_per_token_stored

        elapsed = self.last_time_reward_applicable() - reward.last_update_time
        return reward.reward_per_token_stored + (
            elapsed * reward.reward_rate * PRECISION // self.state.total_staked
        )

    def earned(self, address: str) -> int:
        acc = self.state.get_account(address)
        pending = acc.staked_amount * (self.reward_per_token() - acc.reward_per_token_paid) // PRECISION
        return pending + acc.accrued_reward

    def settle(self, address: Optional[str] = None) -> None:
        """
        Folds elapsed time into the accumulator and, if given, into the account.

        Must run before any change to stake or rate so that the interval up
        to now is accounted at the old values.
        """
        reward = self.state.reward
        reward.reward_per_token_stored = self.reward_per_token()
        reward.last_update_time = self.last_time_reward_applicable()

        if address is not None:
            acc = self.state.get_account(address)
            acc.accrued_reward = self.earned(address)
            acc.reward_per_token_paid = reward.reward_per_token_stored
            self.state.set_account(acc)
            logger.debug(f"Settled {address}: accrued={acc.accrued_reward} rpt={reward.reward_per_token_stored}")

    def reward_for_duration(self) -> int:
        reward = self.state.reward
        return reward.reward_rate * reward.reward_duration

    def add_reward(self, amount: int, duration: int) -> int:
        """
        Starts a new period of `duration` seconds funded with `amount`.

        Whatever the running period has not streamed yet is folded into the
        new rate. Returns the new rate.
        """
        if amount <= 0:
            raise ZeroAmount(f"Reward amount must be positive, got {amount}")
        if duration <= 0:
            raise ZeroAmount(f"Reward duration must be positive, got {duration}")

        self.settle(None)

        reward = self.state.reward
        if self.now >= reward.period_finish:
            new_rate = amount // duration
        else:
            remaining = reward.period_finish - self.now
            leftover = remaining * reward.reward_rate
            new_rate = (amount + leftover) // duration

        if new_rate == 0:
            raise RateTooLow(f"Reward {amount} over {duration}s yields a zero rate")

        reward.reward_rate = new_rate
        reward.reward_duration = duration
        reward.last_update_time = self.now
        reward.period_finish = self.now + duration
        self.state.total_reward_funded += amount

        logger.debug(f"Reward period: rate={new_rate}/s until {reward.period_finish}")
        return new_rate
