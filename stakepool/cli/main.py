# MIT License
# Copyright (c) 2025 Hashborn

import argparse
import sys
import json
import logging
from typing import Any, Dict, List, Optional

from ..core.assets import InMemoryAsset
from ..core.clock import ManualClock
from ..core.events import EventBus
from ..core.pool import StakingPool, DEFAULT_POOL_ADDRESS
from ..protocol.config.params import POOL_CONFIGS, get_pool_config
from ..protocol.crypto.addresses import address_from_label
from ..protocol.types.common import PoolOp, StakingError

logger = logging.getLogger(__name__)

OP_NAMES = {op.value.lower(): op for op in PoolOp}


class ScenarioError(ValueError):
    pass


def build_pool(scenario: Dict[str, Any], config_name: Optional[str] = None):
    """Creates a pool on a manual clock with funded in-memory assets."""
    config = get_pool_config(config_name or scenario.get("network"))
    clock = ManualClock(scenario.get("start_time", 0))

    stake_asset = InMemoryAsset(config.stake_denom, DEFAULT_POOL_ADDRESS)
    if scenario.get("same_asset", False):
        reward_asset = stake_asset
    else:
        reward_asset = InMemoryAsset(config.reward_denom, DEFAULT_POOL_ADDRESS)

    labels: Dict[str, str] = {}

    def resolve(label: str) -> str:
        if label not in labels:
            labels[label] = address_from_label(label, prefix=config.address_prefix)
        return labels[label]

    owner = resolve(scenario.get("owner", "owner"))
    for label, amounts in scenario.get("balances", {}).items():
        addr = resolve(label)
        if isinstance(amounts, int):
            amounts = {"stake": amounts, "reward": amounts}
        stake_amount = int(amounts.get("stake", 0))
        reward_amount = int(amounts.get("reward", 0))
        stake_asset.mint(addr, stake_amount)
        if reward_asset is not stake_asset:
            reward_asset.mint(addr, reward_amount)
        # Unlimited approval keeps scenarios short
        stake_asset.approve(addr, stake_asset.balance_of(addr))
        reward_asset.approve(addr, reward_asset.balance_of(addr))

    cooldown = scenario.get("cooldown", config.cooldown_period)
    pool = StakingPool(stake_asset, reward_asset, owner, cooldown_period=cooldown,
                       clock=clock, events=EventBus())
    return pool, clock, resolve


def run_step(pool: StakingPool, clock: ManualClock, resolve, step: Dict[str, Any]) -> Dict[str, Any]:
    """Applies one scenario step and returns its outcome."""
    if "advance" in step:
        clock.advance(int(step["advance"]))
        return {"step": "advance", "now": clock.now()}

    if "query" in step:
        info = pool.get_stake_info(resolve(step["query"]))
        return {"step": "query", "account": step["query"], "info": info.model_dump()}

    name = step.get("op")
    if name not in OP_NAMES:
        raise ScenarioError(f"Unknown step: {step}")
    op = OP_NAMES[name]
    caller = resolve(step.get("caller", "owner"))

    outcome: Dict[str, Any] = {"step": name, "caller": step.get("caller", "owner"), "now": clock.now()}
    try:
        if op == PoolOp.STAKE:
            pool.stake(caller, int(step["amount"]))
        elif op == PoolOp.REQUEST_UNSTAKE:
            pool.request_unstake(caller, int(step["amount"]))
        elif op == PoolOp.WITHDRAW:
            outcome["amount"] = pool.withdraw(caller)
        elif op == PoolOp.CLAIM_REWARD:
            outcome["amount"] = pool.claim_reward(caller)
        elif op == PoolOp.ADD_REWARD:
            outcome["reward_rate"] = pool.add_reward(caller, int(step["amount"]), int(step["duration"]))
        elif op == PoolOp.SET_COOLDOWN:
            pool.set_cooldown(caller, int(step["period"]))
        elif op == PoolOp.TRANSFER_OWNERSHIP:
            pool.transfer_ownership(caller, resolve(step["new_owner"]))
        outcome["ok"] = True
    except KeyError as e:
        raise ScenarioError(f"Step {step} is missing field {e}")
    except StakingError as e:
        outcome["ok"] = False
        outcome["error"] = type(e).__name__
        outcome["message"] = str(e)
    return outcome


def summarize(pool: StakingPool, labels: List[str], resolve) -> Dict[str, Any]:
    reward = pool.state.reward
    return {
        "now": pool.clock.now(),
        "total_staked": pool.total_staked,
        "reward": reward.model_dump(),
        "reward_per_token": pool.reward_per_token(),
        "total_reward_funded": pool.state.total_reward_funded,
        "total_reward_paid": pool.state.total_reward_paid,
        "accounts": {label: pool.get_stake_info(resolve(label)).model_dump() for label in labels},
        "state_root": pool.state.compute_state_root(),
    }


def run_scenario(scenario: Dict[str, Any], config_name: Optional[str] = None) -> Dict[str, Any]:
    pool, clock, resolve = build_pool(scenario, config_name)

    outcomes = [run_step(pool, clock, resolve, step) for step in scenario.get("steps", [])]

    labels = list(scenario.get("balances", {}).keys())
    return {"steps": outcomes, "summary": summarize(pool, labels, resolve)}


# --- Commands ---

def cmd_presets(args):
    print(f"{'Network':<10} {'Cooldown (s)':>14} {'Duration (s)':>14}  Denoms")
    print("-" * 56)
    for name, cfg in POOL_CONFIGS.items():
        print(f"{name:<10} {cfg.cooldown_period:>14} {cfg.reward_duration:>14}  {cfg.stake_denom}/{cfg.reward_denom}")

def cmd_run(args):
    try:
        with open(args.scenario, "r") as f:
            scenario = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: cannot read scenario: {e}")
        sys.exit(1)

    try:
        result = run_scenario(scenario, args.network)
    except ValueError as e:
        # ScenarioError, unknown preset, clock misuse
        print(f"Error: {e}")
        sys.exit(1)

    rejected = 0
    for outcome in result["steps"]:
        if outcome["step"] == "advance":
            print(f"advance      -> t={outcome['now']}")
        elif outcome["step"] == "query":
            print(f"query        {outcome['account']}: {json.dumps(outcome['info'])}")
        elif outcome["ok"]:
            extra = {k: v for k, v in outcome.items() if k in ("amount", "reward_rate")}
            print(f"{outcome['step']:<12} {outcome['caller']} ok {json.dumps(extra) if extra else ''}".rstrip())
        else:
            rejected += 1
            print(f"{outcome['step']:<12} {outcome['caller']} REJECTED {outcome['error']}: {outcome['message']}")

    print(json.dumps(result["summary"], indent=2))

    if args.strict and rejected:
        sys.exit(1)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(prog="stakepool-sim", description="StakePool scenario runner")
    parser.add_argument("--network", choices=sorted(POOL_CONFIGS), help="Config preset (default: STAKEPOOL_NETWORK or devnet)")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("presets", help="List configuration presets")

    p_run = subparsers.add_parser("run", help="Replay a scenario file")
    p_run.add_argument("scenario", help="Path to scenario JSON")
    p_run.add_argument("--strict", action="store_true", help="Exit 1 if any step is rejected")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format='%(asctime)s %(levelname)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    if args.command == "presets":
        cmd_presets(args)
    elif args.command == "run":
        cmd_run(args)
    else:
        parser.print_help()

if __name__ == "__main__":
    main()
