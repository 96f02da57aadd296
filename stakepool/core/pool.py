# MIT License
# Copyright (c) 2025 Hashborn

"""
Staking pool facade.

Every mutating call reads the clock once, stages its changes on an overlay of
the pool state, performs asset transfers last, and only then commits the
overlay. A failure at any step (precondition, refused transfer, or an
exception raised by a collaborator) leaves the live state untouched,
including the settlement that ran first.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

from .assets import AssetLedger
from .clock import Clock, SystemClock
from .events import (
    EventBus,
    event_bus,
    STAKED,
    UNSTAKE_REQUESTED,
    WITHDRAWN,
    REWARD_PAID,
    REWARD_ADDED,
    COOLDOWN_UPDATED,
    OWNERSHIP_TRANSFERRED,
)
from .ledger import StakeLedger
from .rewards import RewardAccrualEngine
from .state import PoolState
from ..observability.metrics import (
    update_metrics,
    record_operation,
    rewards_funded_total,
    rewards_paid_total,
)
from ..protocol.config.params import CURRENT_CONFIG
from ..protocol.crypto.addresses import address_from_label, is_null_address
from ..protocol.types.account import StakeInfo
from ..protocol.types.common import (
    PoolOp,
    StakingError,
    NotOwner,
    ZeroAddress,
    ZeroStakingToken,
    ZeroRewardToken,
    TransferFailed,
)

logger = logging.getLogger(__name__)

DEFAULT_POOL_ADDRESS = address_from_label("stakepool")


class StakingPool:
    def __init__(self,
                 staking_token: Optional[AssetLedger],
                 reward_token: Optional[AssetLedger],
                 owner: str,
                 cooldown_period: Optional[int] = None,
                 clock: Optional[Clock] = None,
                 events: Optional[EventBus] = None,
                 address: str = DEFAULT_POOL_ADDRESS):
        if staking_token is None:
            raise ZeroStakingToken("Staking token must be provided")
        if reward_token is None:
            raise ZeroRewardToken("Reward token must be provided")
        if is_null_address(owner):
            raise ZeroAddress("Owner cannot be the null address")

        if cooldown_period is None:
            cooldown_period = CURRENT_CONFIG.cooldown_period

        self.staking_token = staking_token
        self.reward_token = reward_token
        self.address = address
        self.clock = clock if clock is not None else SystemClock()
        self.events = events if events is not None else event_bus
        self.state = PoolState(owner=owner, cooldown_period=cooldown_period)

        logger.info(
            f"Pool {address} created: stake={staking_token.symbol} reward={reward_token.symbol} "
            f"cooldown={cooldown_period}s owner={owner}"
        )

    # --- Staging ---

    @contextmanager
    def _operation(self, op: PoolOp, caller: str) -> Iterator[Tuple[RewardAccrualEngine, StakeLedger]]:
        """Runs the body against a staged overlay and commits it on success."""
        staged = self.state.stage()
        engine = RewardAccrualEngine(staged, self.clock.now())
        ledger = StakeLedger(staged, engine)
        try:
            yield engine, ledger
        except StakingError as e:
            logger.warning(f"{op.value} by {caller} rejected: {type(e).__name__}: {e}")
            record_operation(op, error=type(e).__name__)
            raise
        except Exception as e:
            logger.warning(f"{op.value} by {caller} failed: {type(e).__name__}: {e}", exc_info=True)
            record_operation(op, error=type(e).__name__)
            raise

        staged.commit()
        record_operation(op)
        update_metrics(self)

    def _only_owner(self, caller: str):
        if caller != self.state.owner:
            raise NotOwner(f"{caller} is not the pool owner")

    def _pull(self, asset: AssetLedger, sender: str, amount: int):
        if not asset.transfer_in(sender, amount):
            raise TransferFailed(asset.symbol, "in", sender, amount)

    def _push(self, asset: AssetLedger, recipient: str, amount: int):
        if not asset.transfer_out(recipient, amount):
            raise TransferFailed(asset.symbol, "out", recipient, amount)

    # --- Staker operations ---

    def stake(self, caller: str, amount: int) -> None:
        with self._operation(PoolOp.STAKE, caller) as (engine, ledger):
            ledger.stake(caller, amount)
            self._pull(self.staking_token, caller, amount)

        logger.info(f"{caller} staked {amount} (total {self.state.total_staked})")
        self.events.emit(STAKED, account=caller, amount=amount)

    def request_unstake(self, caller: str, amount: int) -> None:
        with self._operation(PoolOp.REQUEST_UNSTAKE, caller) as (engine, ledger):
            acc = ledger.request_unstake(caller, amount)
            request_time = acc.unstake_request_time

        logger.info(f"{caller} requested unstake of {amount} at {request_time}")
        self.events.emit(UNSTAKE_REQUESTED, account=caller, amount=amount, request_time=request_time)

    def withdraw(self, caller: str) -> int:
        with self._operation(PoolOp.WITHDRAW, caller) as (engine, ledger):
            amount = ledger.withdraw(caller)
            self._push(self.staking_token, caller, amount)

        logger.info(f"{caller} withdrew {amount} (total {self.state.total_staked})")
        self.events.emit(WITHDRAWN, account=caller, amount=amount)
        return amount

    def claim_reward(self, caller: str) -> int:
        with self._operation(PoolOp.CLAIM_REWARD, caller) as (engine, ledger):
            amount = ledger.claim_reward(caller)
            self._push(self.reward_token, caller, amount)

        rewards_paid_total.inc(amount)
        logger.info(f"Paid reward {amount} to {caller}")
        self.events.emit(REWARD_PAID, account=caller, amount=amount)
        return amount

    # --- Owner operations ---

    def add_reward(self, caller: str, amount: int, duration: int) -> int:
        with self._operation(PoolOp.ADD_REWARD, caller) as (engine, ledger):
            self._only_owner(caller)
            rate = engine.add_reward(amount, duration)
            period_finish = engine.state.reward.period_finish
            self._pull(self.reward_token, caller, amount)

        rewards_funded_total.inc(amount)
        logger.info(f"Reward {amount} added over {duration}s: rate={rate}/s, finishes at {period_finish}")
        self.events.emit(
            REWARD_ADDED, amount=amount, duration=duration, reward_rate=rate, period_finish=period_finish
        )
        return rate

    def set_cooldown(self, caller: str, period: int) -> None:
        with self._operation(PoolOp.SET_COOLDOWN, caller) as (engine, ledger):
            self._only_owner(caller)
            engine.state.cooldown_period = period

        logger.info(f"Cooldown set to {period}s")
        self.events.emit(COOLDOWN_UPDATED, cooldown_period=period)

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        with self._operation(PoolOp.TRANSFER_OWNERSHIP, caller) as (engine, ledger):
            self._only_owner(caller)
            if is_null_address(new_owner):
                raise ZeroAddress("New owner cannot be the null address")
            engine.state.owner = new_owner

        logger.info(f"Ownership transferred from {caller} to {new_owner}")
        self.events.emit(OWNERSHIP_TRANSFERRED, previous_owner=caller, new_owner=new_owner)

    # --- Views ---

    def _views(self) -> Tuple[RewardAccrualEngine, StakeLedger]:
        engine = RewardAccrualEngine(self.state, self.clock.now())
        return engine, StakeLedger(self.state, engine)

    @property
    def owner(self) -> str:
        return self.state.owner

    @property
    def cooldown_period(self) -> int:
        return self.state.cooldown_period

    @property
    def total_staked(self) -> int:
        return self.state.total_staked

    def staked_of(self, account: str) -> int:
        return self.state.get_account(account).staked_amount

    def last_time_reward_applicable(self) -> int:
        engine, _ = self._views()
        return engine.last_time_reward_applicable()

    def reward_per_token(self) -> int:
        engine, _ = self._views()
        return engine.reward_per_token()

    def earned(self, account: str) -> int:
        engine, _ = self._views()
        return engine.earned(account)

    def reward_for_duration(self) -> int:
        engine, _ = self._views()
        return engine.reward_for_duration()

    def get_stake_info(self, account: str) -> StakeInfo:
        _, ledger = self._views()
        return ledger.get_stake_info(account)
