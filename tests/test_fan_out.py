"""Tests for the fan-out policies."""

import asyncio

import pytest

from bgm_builder.utils.fan_out import FanOut, fan_out


class ConcurrencyProbe:
    def __init__(self):
        self.active = 0
        self.peak = 0
        self.started = []

    async def work(self, item):
        self.started.append(item)
        self.active += 1
        self.peak = max(self.peak, self.active)
        # Later items finish first, so order only survives if results are re-sorted.
        await asyncio.sleep(0.01 * (5 - item))
        self.active -= 1
        return item * 10


@pytest.mark.asyncio
async def test_parallel_runs_units_together_and_keeps_order():
    probe = ConcurrencyProbe()
    results = await fan_out(range(5), probe.work, FanOut.PARALLEL)

    assert results == [0, 10, 20, 30, 40]
    assert probe.peak == 5


@pytest.mark.asyncio
async def test_sequential_runs_units_one_at_a_time_in_order():
    probe = ConcurrencyProbe()
    results = await fan_out(range(5), probe.work, FanOut.SEQUENTIAL)

    assert results == [0, 10, 20, 30, 40]
    assert probe.peak == 1
    assert probe.started == [0, 1, 2, 3, 4]


@pytest.mark.asyncio
async def test_empty_input():
    assert await fan_out([], asyncio.sleep) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("policy", list(FanOut))
async def test_errors_propagate(policy):
    async def work(item):
        if item == 2:
            raise ValueError("bad item")
        return item

    with pytest.raises(ValueError, match="bad item"):
        await fan_out(range(4), work, policy)
