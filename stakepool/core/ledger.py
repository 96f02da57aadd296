# MIT License
# Copyright (c) 2025 Hashborn

from .state import PoolState
from .rewards import RewardAccrualEngine
from ..protocol.types.account import StakeAccount, StakeInfo
from ..protocol.types.common import (
    ZeroAmount,
    InsufficientStake,
    NoRequest,
    CooldownActive,
    NoReward,
)


class StakeLedger:
    """
    Stake balances and the per-account unstake state machine.

    NoRequest --request_unstake--> PendingCooldown --(time)--> Withdrawable --withdraw--> NoRequest

    A new request may be filed in any state; it replaces the outstanding
    one and restarts the timer. Each mutating call settles the account
    first. Asset movement is left to the caller.
    """

    def __init__(self, state: PoolState, engine: RewardAccrualEngine):
        self.state = state
        self.engine = engine

    @property
    def now(self) -> int:
        return self.engine.now

    def cooldown_ends_at(self, acc: StakeAccount) -> int:
        return acc.unstake_request_time + self.state.cooldown_period

    def is_withdrawable(self, acc: StakeAccount) -> bool:
        return acc.has_request and self.now >= self.cooldown_ends_at(acc)

    def stake(self, address: str, amount: int) -> StakeAccount:
        if amount <= 0:
            raise ZeroAmount(f"Stake amount must be positive, got {amount}")

        self.engine.settle(address)

        acc = self.state.get_account(address)
        if acc.staked_amount == 0:
            self.state.accounts_staking += 1
        acc.staked_amount += amount
        self.state.total_staked += amount
        self.state.set_account(acc)
        return acc

    def request_unstake(self, address: str, amount: int) -> StakeAccount:
        if amount <= 0:
            raise ZeroAmount(f"Unstake amount must be positive, got {amount}")

        self.engine.settle(address)

        acc = self.state.get_account(address)
        if amount > acc.staked_amount:
            raise InsufficientStake(f"Insufficient stake: have {acc.staked_amount}, requested {amount}")

        # Overwrites any outstanding request
        acc.unstake_request_amount = amount
        acc.unstake_request_time = self.now
        self.state.set_account(acc)
        return acc

    def withdraw(self, address: str) -> int:
        """Completes the outstanding request. Returns the amount released."""
        self.engine.settle(address)

        acc = self.state.get_account(address)
        if not acc.has_request:
            raise NoRequest(f"No unstake request outstanding for {address}")
        if self.now < self.cooldown_ends_at(acc):
            raise CooldownActive(
                f"Cooldown active until {self.cooldown_ends_at(acc)} ({self.cooldown_ends_at(acc) - self.now}s left)"
            )

        amount = acc.unstake_request_amount
        if acc.staked_amount < amount:
            raise InsufficientStake(f"Insufficient stake: have {acc.staked_amount}, request is for {amount}")

        acc.unstake_request_amount = 0
        acc.unstake_request_time = 0
        acc.staked_amount -= amount
        self.state.total_staked -= amount
        if acc.staked_amount == 0:
            self.state.accounts_staking -= 1
        self.state.set_account(acc)
        return amount

    def claim_reward(self, address: str) -> int:
        """Zeroes the settled reward of `address`. Returns the amount owed."""
        self.engine.settle(address)

        acc = self.state.get_account(address)
        reward = acc.accrued_reward
        if reward == 0:
            raise NoReward(f"No reward accrued for {address}")

        acc.accrued_reward = 0
        self.state.total_reward_paid += reward
        self.state.set_account(acc)
        return reward

    def get_stake_info(self, address: str) -> StakeInfo:
        acc = self.state.get_account(address)
        return StakeInfo(
            staked_amount=acc.staked_amount,
            earned=self.engine.earned(address),
            request_amount=acc.unstake_request_amount,
            request_time=acc.unstake_request_time,
            withdrawable=self.is_withdrawable(acc),
        )
