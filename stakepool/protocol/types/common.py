# MIT License
# Copyright (c) 2025 Hashborn

from enum import Enum


class PoolOp(str, Enum):
    STAKE = "STAKE"
    REQUEST_UNSTAKE = "REQUEST_UNSTAKE"
    WITHDRAW = "WITHDRAW"
    CLAIM_REWARD = "CLAIM_REWARD"

    # Owner-only
    ADD_REWARD = "ADD_REWARD"
    SET_COOLDOWN = "SET_COOLDOWN"
    TRANSFER_OWNERSHIP = "TRANSFER_OWNERSHIP"


class ProtocolError(Exception):
    pass


class StakingError(ProtocolError):
    """Base for every named failure that rejects a pool operation."""


class ZeroAmount(StakingError):
    pass


class InsufficientStake(StakingError):
    pass


class NoRequest(StakingError):
    pass


class CooldownActive(StakingError):
    pass


class NoReward(StakingError):
    pass


class RateTooLow(StakingError):
    pass


class NotOwner(StakingError):
    pass


class ZeroAddress(StakingError):
    pass


class ZeroStakingToken(StakingError):
    pass


class ZeroRewardToken(StakingError):
    pass


class TransferFailed(StakingError):
    """Raised when the asset collaborator refuses a transfer."""

    def __init__(self, asset: str, direction: str, account: str, amount: int):
        self.asset = asset
        self.direction = direction
        self.account = account
        self.amount = amount
        super().__init__(f"{asset} transfer {direction} of {amount} for {account} failed")
