# MIT License
# Copyright (c) 2025 Hashborn

import pytest

from stakepool.core.assets import InMemoryAsset

from helpers import ALICE, BOB

CUSTODY = "custody"


@pytest.fixture
def token():
    token = InMemoryAsset("stk", CUSTODY)
    token.mint(ALICE, 1_000)
    return token


def test_transfer_in_requires_allowance(token):
    assert token.transfer_in(ALICE, 100) is False
    assert token.balance_of(ALICE) == 1_000

    token.approve(ALICE, 150)
    assert token.transfer_in(ALICE, 100) is True
    assert token.balance_of(ALICE) == 900
    assert token.balance_of(CUSTODY) == 100
    assert token.allowance(ALICE) == 50


def test_transfer_in_requires_balance(token):
    token.approve(ALICE, 5_000)
    assert token.transfer_in(ALICE, 1_001) is False
    assert token.balance_of(CUSTODY) == 0
    assert token.allowance(ALICE) == 5_000


def test_transfer_out_limited_by_custody(token):
    token.approve(ALICE, 300)
    token.transfer_in(ALICE, 300)

    assert token.transfer_out(BOB, 301) is False
    assert token.transfer_out(BOB, 300) is True
    assert token.balance_of(BOB) == 300
    assert token.balance_of(CUSTODY) == 0


def test_supply_is_conserved_by_transfers(token):
    token.mint(BOB, 500)
    token.approve(ALICE, 1_000)
    token.transfer_in(ALICE, 700)
    token.transfer_out(BOB, 200)

    assert token.total_supply == 1_500
    assert sum(token.balances.values()) == token.total_supply


def test_negative_amounts_rejected(token):
    with pytest.raises(ValueError):
        token.mint(ALICE, -1)
    with pytest.raises(ValueError):
        token.approve(ALICE, -1)
    assert token.transfer_in(ALICE, -1) is False
    assert token.transfer_out(ALICE, -1) is False
