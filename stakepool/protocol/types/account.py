# MIT License
# Copyright (c) 2025 Hashborn

from pydantic import BaseModel


class StakeAccount(BaseModel):
    address: str
    staked_amount: int = 0

    # Reward bookkeeping (settled lazily)
    reward_per_token_paid: int = 0    # reward_per_token_stored at last settlement
    accrued_reward: int = 0           # Owed as of last settlement, unclaimed

    # Outstanding unstake request (0/0 = none)
    unstake_request_amount: int = 0
    unstake_request_time: int = 0

    @property
    def has_request(self) -> bool:
        return self.unstake_request_amount > 0


class StakeInfo(BaseModel):
    """Read-only view of an account combining ledger and reward state."""
    staked_amount: int
    earned: int
    request_amount: int
    request_time: int
    withdrawable: bool
