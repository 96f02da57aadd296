# MIT License
# Copyright (c) 2025 Hashborn

"""
StakePool parameters.

All amounts, rates and accumulators are plain Python ints (arbitrary
precision), so `amount * PRECISION` cannot overflow. Any token supply
expressible in 18-decimal minimal units is within the safe range.
"""

import os
from dataclasses import dataclass
from typing import Dict, Optional

# Global Constants
DECIMALS = 18
UNIT = 10**DECIMALS

# Fixed-point scale of reward_per_token_stored
PRECISION = 10**18

SECONDS_PER_DAY = 86_400

ADDRESS_PREFIX = "stk"


@dataclass
class PoolConfig:
    """Deployment parameters for a pool."""

    network_id: str
    cooldown_period: int            # Seconds between unstake request and withdraw
    reward_duration: int            # Default reward period used by tooling
    stake_denom: str = "stk"
    reward_denom: str = "rwd"
    decimals: int = DECIMALS
    address_prefix: str = ADDRESS_PREFIX


POOL_CONFIGS: Dict[str, PoolConfig] = {
    "devnet": PoolConfig(
        network_id="devnet",
        cooldown_period=60,                       # 1 minute
        reward_duration=SECONDS_PER_DAY,          # 1 day
    ),
    "testnet": PoolConfig(
        network_id="testnet",
        cooldown_period=SECONDS_PER_DAY,          # 1 day
        reward_duration=7 * SECONDS_PER_DAY,      # 1 week
    ),
    "mainnet": PoolConfig(
        network_id="mainnet",
        cooldown_period=7 * SECONDS_PER_DAY,      # 1 week
        reward_duration=30 * SECONDS_PER_DAY,     # ~1 month
    ),
}


def get_pool_config(name: Optional[str] = None) -> PoolConfig:
    """Returns the preset called `name`, or the one selected by STAKEPOOL_NETWORK."""
    if name is None:
        name = os.environ.get("STAKEPOOL_NETWORK", "devnet")
    if name not in POOL_CONFIGS:
        raise ValueError(f"Unknown network '{name}' (expected one of {', '.join(POOL_CONFIGS)})")
    return POOL_CONFIGS[name]


# Default to devnet unless overridden in the environment
CURRENT_CONFIG = get_pool_config()
