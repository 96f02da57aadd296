# MIT License
# Copyright (c) 2025 Hashborn

"""
StakePool: token staking with time-proportional rewards and cooldown-gated withdrawals.
"""

from .core.pool import StakingPool
from .core.assets import AssetLedger, InMemoryAsset
from .core.clock import Clock, SystemClock, ManualClock

__all__ = [
    "StakingPool",
    "AssetLedger",
    "InMemoryAsset",
    "Clock",
    "SystemClock",
    "ManualClock",
]
