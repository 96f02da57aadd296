# MIT License
# Copyright (c) 2025 Hashborn

from pydantic import BaseModel


class RewardState(BaseModel):
    """Global reward stream. Times are unix seconds."""
    reward_rate: int = 0                 # Reward units streamed per second
    reward_duration: int = 0             # Length of the current period
    period_finish: int = 0               # Rate stops applying at this time
    last_update_time: int = 0            # reward_per_token_stored valid through here
    reward_per_token_stored: int = 0     # Scaled by PRECISION, non-decreasing
