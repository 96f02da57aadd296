# MIT License
# Copyright (c) 2025 Hashborn

import json

import pytest

from stakepool.cli.main import main, run_scenario, ScenarioError
from stakepool.protocol.config.params import UNIT

from helpers import DAY

COOLDOWN_SCENARIO = {
    "network": "testnet",
    "cooldown": DAY,
    "balances": {"alice": 1_000 * UNIT, "owner": 10_000 * UNIT},
    "steps": [
        {"op": "stake", "caller": "alice", "amount": 100 * UNIT},
        {"op": "add_reward", "caller": "owner", "amount": 1_000 * UNIT, "duration": 10 * DAY},
        {"op": "request_unstake", "caller": "alice", "amount": 100 * UNIT},
        {"advance": DAY - 1},
        {"op": "withdraw", "caller": "alice"},
        {"advance": 1},
        {"op": "withdraw", "caller": "alice"},
        {"query": "alice"},
    ],
}


def test_run_scenario_reports_each_step():
    result = run_scenario(COOLDOWN_SCENARIO)
    steps = result["steps"]

    assert [s.get("ok") for s in steps if "ok" in s] == [True, True, True, False, True]
    assert steps[4]["error"] == "CooldownActive"
    assert steps[6]["amount"] == 100 * UNIT
    assert steps[7]["info"]["staked_amount"] == 0

    summary = result["summary"]
    assert summary["total_staked"] == 0
    assert summary["now"] == DAY
    assert summary["total_reward_funded"] == 1_000 * UNIT
    assert summary["accounts"]["alice"]["earned"] > 0


def test_replay_is_deterministic():
    first = run_scenario(COOLDOWN_SCENARIO)["summary"]["state_root"]
    second = run_scenario(COOLDOWN_SCENARIO)["summary"]["state_root"]
    assert first == second


def test_unknown_op_rejected():
    with pytest.raises(ScenarioError):
        run_scenario({"steps": [{"op": "slash", "caller": "alice"}]})


def test_missing_field_rejected():
    with pytest.raises(ScenarioError):
        run_scenario({"steps": [{"op": "stake", "caller": "alice"}]})


def test_presets_command(capsys):
    main(["presets"])
    out = capsys.readouterr().out
    assert "devnet" in out and "mainnet" in out


def test_run_command_strict_exit(tmp_path, capsys):
    path = tmp_path / "scenario.json"
    path.write_text(json.dumps(COOLDOWN_SCENARIO))

    main(["run", str(path)])
    out = capsys.readouterr().out
    assert "REJECTED CooldownActive" in out
    assert '"state_root"' in out

    with pytest.raises(SystemExit) as exc:
        main(["run", str(path), "--strict"])
    assert exc.value.code == 1


def test_run_command_missing_file(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["run", str(tmp_path / "missing.json")])
    assert exc.value.code == 1
