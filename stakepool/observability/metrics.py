# MIT License
# Copyright (c) 2025 Hashborn

"""
Prometheus Metrics Exporter

Exports staking pool metrics in Prometheus format.

Metrics:
- Stake totals and participating accounts
- Reward stream (rate, accumulator, period finish)
- Reward funding and payouts
- Committed and rejected operations, emitted events
"""

from prometheus_client import Counter, Gauge, CollectorRegistry

# Create registry for metrics
metrics_registry = CollectorRegistry()

# ═══════════════════════════════════════════════════════════════════
# STAKE METRICS
# ═══════════════════════════════════════════════════════════════════

total_staked = Gauge(
    'stakepool_total_staked',
    'Total stake held by the pool',
    registry=metrics_registry
)

accounts_staking = Gauge(
    'stakepool_accounts_staking',
    'Number of accounts with a non-zero stake',
    registry=metrics_registry
)

cooldown_period_seconds = Gauge(
    'stakepool_cooldown_period_seconds',
    'Delay between an unstake request and withdrawal',
    registry=metrics_registry
)

# ═══════════════════════════════════════════════════════════════════
# REWARD METRICS
# ═══════════════════════════════════════════════════════════════════

reward_rate = Gauge(
    'stakepool_reward_rate',
    'Reward units streamed per second',
    registry=metrics_registry
)

reward_per_token_stored = Gauge(
    'stakepool_reward_per_token_stored',
    'Settled reward per unit of stake (scaled)',
    registry=metrics_registry
)

reward_period_finish = Gauge(
    'stakepool_reward_period_finish',
    'Unix time at which the current reward period ends',
    registry=metrics_registry
)

reward_outstanding = Gauge(
    'stakepool_reward_outstanding',
    'Reward funded but not yet paid out',
    registry=metrics_registry
)

rewards_funded_total = Counter(
    'stakepool_rewards_funded_total',
    'Total reward added by the owner',
    registry=metrics_registry
)

rewards_paid_total = Counter(
    'stakepool_rewards_paid_total',
    'Total reward claimed by stakers',
    registry=metrics_registry
)

# ═══════════════════════════════════════════════════════════════════
# OPERATION METRICS
# ═══════════════════════════════════════════════════════════════════

operations_total = Counter(
    'stakepool_operations_total',
    'Committed pool operations',
    ['op'],
    registry=metrics_registry
)

operations_rejected_total = Counter(
    'stakepool_operations_rejected_total',
    'Rejected pool operations',
    ['op', 'error'],
    registry=metrics_registry
)

events_emitted_total = Counter(
    'stakepool_events_emitted_total',
    'Events emitted on the event bus',
    ['event'],
    registry=metrics_registry
)


# ═══════════════════════════════════════════════════════════════════
# HELPER FUNCTIONS
# ═══════════════════════════════════════════════════════════════════

def update_metrics(pool):
    """
    Sync gauges from pool state. Counters are updated where the
    corresponding operation commits.

    Args:
        pool: StakingPool instance
    """
    state = pool.state

    total_staked.set(state.total_staked)
    cooldown_period_seconds.set(state.cooldown_period)
    accounts_staking.set(state.accounts_staking)

    reward_rate.set(state.reward.reward_rate)
    reward_per_token_stored.set(state.reward.reward_per_token_stored)
    reward_period_finish.set(state.reward.period_finish)
    reward_outstanding.set(state.total_reward_funded - state.total_reward_paid)


def record_operation(op, error: str = None):
    """
    Count a committed or rejected operation.

    Args:
        op: PoolOp of the operation
        error: Exception class name if the operation was rejected
    """
    if error is None:
        operations_total.labels(op=op.value).inc()
    else:
        operations_rejected_total.labels(op=op.value, error=error).inc()
