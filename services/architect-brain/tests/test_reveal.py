"""Tests for the cancellable token reveal."""

import asyncio
import random
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from reveal import TokenReveal

TEXT = "Confidence: 84%\nFeatures: Catalog, Ordering"


class RecordingRandom(random.Random):
    def __init__(self):
        super().__init__(7)
        self.delays = []

    def uniform(self, a, b):
        value = super().uniform(a, b)
        self.delays.append(value)
        return value


class TestTokenReveal:
    @pytest.mark.asyncio
    async def test_reveals_whole_text(self):
        reveal = TokenReveal(TEXT, min_delay=0, max_delay=0)

        tokens = [token async for token in reveal]

        assert "".join(tokens) == TEXT
        assert len(tokens) == 5
        assert reveal.revealed == TEXT

    @pytest.mark.asyncio
    async def test_collect(self):
        assert await TokenReveal("  leading and trailing  ", min_delay=0, max_delay=0).collect() == "  leading and trailing  "

    @pytest.mark.asyncio
    async def test_empty_text(self):
        assert await TokenReveal("", min_delay=0, max_delay=0).collect() == ""

    @pytest.mark.asyncio
    async def test_delays_within_bounds(self):
        rng = RecordingRandom()
        reveal = TokenReveal(TEXT, min_delay=0.001, max_delay=0.003, rng=rng)

        await reveal.collect()

        assert len(rng.delays) == 5
        assert all(0.001 <= delay <= 0.003 for delay in rng.delays)

    @pytest.mark.asyncio
    async def test_cancel_between_tokens(self):
        reveal = TokenReveal(TEXT, min_delay=0, max_delay=0)
        received = []

        async for token in reveal:
            received.append(token)
            if len(received) == 2:
                reveal.cancel()

        assert len(received) == 2
        assert reveal.cancelled is True
        assert reveal.revealed == "".join(received)

    @pytest.mark.asyncio
    async def test_cancel_during_delay_drops_pending_token(self):
        reveal = TokenReveal(TEXT, min_delay=0.05, max_delay=0.05)
        task = asyncio.create_task(reveal.collect())
        await asyncio.sleep(0)

        reveal.cancel()

        assert await task == ""

    @pytest.mark.asyncio
    async def test_cancel_before_start(self):
        reveal = TokenReveal(TEXT, min_delay=0, max_delay=0)
        reveal.cancel()

        assert await reveal.collect() == ""

    @pytest.mark.parametrize("low,high", [(-0.1, 0.1), (0.2, 0.1)])
    def test_invalid_delay_range(self, low, high):
        with pytest.raises(ValueError):
            TokenReveal(TEXT, min_delay=low, max_delay=high)
