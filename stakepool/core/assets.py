# MIT License
# Copyright (c) 2025 Hashborn

"""
Asset-transfer collaborator.

A pool holds one instance for the stake asset and one for the reward asset
(possibly the same instance). Each call is atomic on the asset side: it
either moves the full amount and returns True, or moves nothing and returns
False.
"""

import logging
from typing import Dict

logger = logging.getLogger(__name__)


class AssetLedger:
    """Interface the pool expects from a fungible asset."""

    symbol: str = ""

    def transfer_in(self, sender: str, amount: int) -> bool:
        """Moves `amount` from `sender` into the pool's custody."""
        raise NotImplementedError

    def transfer_out(self, recipient: str, amount: int) -> bool:
        """Moves `amount` from the pool's custody to `recipient`."""
        raise NotImplementedError

    def balance_of(self, account: str) -> int:
        raise NotImplementedError


class InMemoryAsset(AssetLedger):
    """
    Dictionary-backed fungible asset.

    Pulls into custody require both balance and an allowance granted to the
    custody address via `approve`, mirroring an ERC-20 style token.
    """

    def __init__(self, symbol: str, custody: str):
        self.symbol = symbol
        self.custody = custody
        self.balances: Dict[str, int] = {}
        self.allowances: Dict[str, int] = {}
        self.total_supply = 0

    def mint(self, account: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Cannot mint negative amount: {amount}")
        self.balances[account] = self.balances.get(account, 0) + amount
        self.total_supply += amount

    def approve(self, owner: str, amount: int) -> None:
        """Sets how much the custody address may pull from `owner`."""
        if amount < 0:
            raise ValueError(f"Allowance cannot be negative: {amount}")
        self.allowances[owner] = amount

    def allowance(self, owner: str) -> int:
        return self.allowances.get(owner, 0)

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def transfer_in(self, sender: str, amount: int) -> bool:
        if amount < 0:
            return False
        if self.allowance(sender) < amount:
            logger.debug(f"{self.symbol}: allowance {self.allowance(sender)} of {sender} below {amount}")
            return False
        if self.balance_of(sender) < amount:
            logger.debug(f"{self.symbol}: balance {self.balance_of(sender)} of {sender} below {amount}")
            return False

        self.allowances[sender] -= amount
        self._move(sender, self.custody, amount)
        return True

    def transfer_out(self, recipient: str, amount: int) -> bool:
        if amount < 0:
            return False
        if self.balance_of(self.custody) < amount:
            logger.debug(f"{self.symbol}: custody holds {self.balance_of(self.custody)}, cannot send {amount}")
            return False

        self._move(self.custody, recipient, amount)
        return True

    def _move(self, source: str, target: str, amount: int) -> None:
        self.balances[source] = self.balance_of(source) - amount
        self.balances[target] = self.balance_of(target) + amount
