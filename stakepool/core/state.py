# MIT License
# Copyright (c) 2025 Hashborn

from typing import Dict, List, Optional
from ..protocol.types.account import StakeAccount
from ..protocol.types.reward import RewardState
from ..protocol.crypto.hash import sha256, merkle_root

class PoolState:
    """
    Everything a pool owns: the reward stream, stake totals and account records.

    The reward engine and the stake ledger operate on the same instance.
    Operations run against a `stage()` overlay: it shares the committed
    account table read-only and copies a record only when the operation
    first touches it. `commit()` merges the overlay back, so an operation
    costs O(1) in the number of accounts.
    """

    def __init__(self,
                 owner: str,
                 cooldown_period: int,
                 reward: Optional[RewardState] = None,
                 accounts: Optional[Dict[str, StakeAccount]] = None,
                 total_staked: int = 0,
                 total_reward_funded: int = 0,
                 total_reward_paid: int = 0,
                 accounts_staking: int = 0,
                 parent: Optional['PoolState'] = None):
        self.owner = owner
        self.cooldown_period = cooldown_period
        self.reward = reward if reward is not None else RewardState()
        # address -> StakeAccount, records are never deleted
        self._accounts: Dict[str, StakeAccount] = accounts if accounts is not None else {}
        self.total_staked = total_staked
        self.accounts_staking = accounts_staking   # Accounts with staked_amount > 0

        # Funding bookkeeping
        self.total_reward_funded = total_reward_funded
        self.total_reward_paid = total_reward_paid

        # Overlay of records touched while staged
        self._parent = parent
        self._dirty: Dict[str, StakeAccount] = {}

    @property
    def is_staged(self) -> bool:
        return self._parent is not None

    def stage(self) -> 'PoolState':
        """Creates a copy-on-write overlay to run one operation against."""
        return PoolState(
            owner=self.owner,
            cooldown_period=self.cooldown_period,
            reward=self.reward.model_copy(),
            accounts=self._accounts,
            total_staked=self.total_staked,
            total_reward_funded=self.total_reward_funded,
            total_reward_paid=self.total_reward_paid,
            accounts_staking=self.accounts_staking,
            parent=self,
        )

    def commit(self) -> 'PoolState':
        """Writes a staged overlay into its parent and returns the parent."""
        if self._parent is None:
            raise ValueError("Only a staged state can be committed")

        parent = self._parent
        parent.owner = self.owner
        parent.cooldown_period = self.cooldown_period
        parent.reward = self.reward
        parent.total_staked = self.total_staked
        parent.total_reward_funded = self.total_reward_funded
        parent.total_reward_paid = self.total_reward_paid
        parent.accounts_staking = self.accounts_staking
        parent._accounts.update(self._dirty)

        self._dirty = {}
        self._parent = None
        return parent

    def get_account(self, address: str) -> StakeAccount:
        if address in self._dirty:
            return self._dirty[address]

        if address in self._accounts:
            acc = self._accounts[address]
            if self.is_staged:
                # First touch: work on a private copy
                acc = acc.model_copy()
                self._dirty[address] = acc
            return acc

        # Unknown accounts read as zero-initialized until something is written
        return StakeAccount(address=address)

    def set_account(self, account: StakeAccount):
        if self.is_staged:
            self._dirty[account.address] = account
        else:
            self._accounts[account.address] = account

    def has_account(self, address: str) -> bool:
        return address in self._dirty or address in self._accounts

    def get_all_accounts(self) -> List[StakeAccount]:
        """All records in address order (O(n), for tooling and checks only)."""
        merged = {**self._accounts, **self._dirty}
        return [merged[addr] for addr in sorted(merged)]

    def sum_staked(self) -> int:
        """Recomputes total stake from account records (O(n), for checks only)."""
        return sum(acc.staked_amount for acc in self.get_all_accounts())

    def compute_state_root(self) -> str:
        """Merkle root over the reward stream and every account record."""
        r = self.reward
        items = [sha256((
            "reward"
            + str(r.reward_rate)
            + ":" + str(r.reward_duration)
            + ":" + str(r.period_finish)
            + ":" + str(r.last_update_time)
            + ":" + str(r.reward_per_token_stored)
            + ":" + str(self.total_staked)
            + ":" + str(self.cooldown_period)
            + ":" + self.owner
        ).encode("utf-8"))]

        for acc in self.get_all_accounts():
            leaf_data = (
                acc.address
                + ":" + str(acc.staked_amount)
                + ":" + str(acc.reward_per_token_paid)
                + ":" + str(acc.accrued_reward)
                + ":" + str(acc.unstake_request_amount)
                + ":" + str(acc.unstake_request_time)
            ).encode("utf-8")
            items.append(sha256(leaf_data))

        return merkle_root(items).hex()
