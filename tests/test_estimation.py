"""Merge/split estimations against an in-memory vault reader."""

import asyncio

from factories import OPINION_TOKEN, POLYMARKET_TOKEN, VAULT, FakeReader
from pokvault.estimation import EstimationService
from pokvault.models import MergeEstimationParams, SplitEstimationParams


def _merge(amount=10):
    return MergeEstimationParams(
        token_a=OPINION_TOKEN, token_id_a=111, token_b=POLYMARKET_TOKEN, token_id_b=222, amount=amount
    )


def _split(base_amount=100):
    return SplitEstimationParams(
        token_a=OPINION_TOKEN, token_id_a=111, token_b=POLYMARKET_TOKEN, token_id_b=222, base_amount=base_amount
    )


def test_merge_with_liquidity():
    svc = EstimationService(FakeReader(early_exit=500, assets=1000, reserved=300))
    est = asyncio.run(svc.estimate_merge(_merge()))
    assert est.estimated_receive_amount == 500
    assert est.available_vault_liquidity == 700
    assert est.total_assets == 1000
    assert est.total_reserved == 300
    assert est.vault_has_liquidity


def test_merge_exact_liquidity_is_enough():
    svc = EstimationService(FakeReader(early_exit=700, assets=1000, reserved=300))
    assert asyncio.run(svc.estimate_merge(_merge())).vault_has_liquidity


def test_merge_without_liquidity():
    svc = EstimationService(FakeReader(early_exit=701, assets=1000, reserved=300))
    assert not asyncio.run(svc.estimate_merge(_merge())).vault_has_liquidity


def test_missing_reads_count_as_zero():
    svc = EstimationService(FakeReader(early_exit=None, assets=None, reserved=None))
    est = asyncio.run(svc.estimate_merge(_merge()))
    assert est.estimated_receive_amount == 0
    assert est.available_vault_liquidity == 0
    assert est.vault_has_liquidity


def test_split_needs_both_legs():
    reader = FakeReader(
        split=40,
        balances={(OPINION_TOKEN.lower(), 111): 50, (POLYMARKET_TOKEN.lower(), 222): 39},
    )
    svc = EstimationService(reader)
    est = asyncio.run(svc.estimate_split(_split()))
    assert est.estimated_tokens_received == 40
    assert est.vault_balance_token_a == 50
    assert est.vault_balance_token_b == 39
    assert not est.vault_has_tokens
    # balances are read for the vault itself
    assert {owner for _, owner, _ in reader.balance_calls} == {VAULT}

    reader.balances[(POLYMARKET_TOKEN.lower(), 222)] = 40
    assert asyncio.run(svc.estimate_split(_split())).vault_has_tokens


def test_split_missing_balances_are_zero():
    svc = EstimationService(FakeReader(split=1))
    est = asyncio.run(svc.estimate_split(_split()))
    assert est.vault_balance_token_a == 0
    assert not est.vault_has_tokens


def test_vault_liquidity():
    svc = EstimationService(FakeReader(assets=10**24, reserved=10**23))
    liq = asyncio.run(svc.get_vault_liquidity())
    assert liq.total_assets == 10**24
    assert liq.available_liquidity == 9 * 10**23


def test_liquidity_not_clamped_when_overreserved():
    svc = EstimationService(FakeReader(assets=100, reserved=150))
    assert asyncio.run(svc.get_vault_liquidity()).available_liquidity == -50


def test_token_balance():
    reader = FakeReader(balances={(OPINION_TOKEN.lower(), 111): 12})
    svc = EstimationService(reader)
    assert asyncio.run(svc.get_token_balance(OPINION_TOKEN, 111, "0x0000000000000000000000000000000000000001")) == 12
