"""Cosmetic token-by-token reveal of result text.

Iteration stops as soon as ``cancel()`` is called; the flag is checked before
and after every delay, so a torn-down consumer never receives another token.
"""

import asyncio
import random
import re
from typing import AsyncIterator

from config import settings

_TOKEN = re.compile(r"\s*\S+\s*")


class TokenReveal:
    def __init__(
        self,
        text: str,
        min_delay: float | None = None,
        max_delay: float | None = None,
        rng: random.Random | None = None,
    ):
        self._min_delay = min_delay if min_delay is not None else settings.REVEAL_MIN_DELAY
        self._max_delay = max_delay if max_delay is not None else settings.REVEAL_MAX_DELAY
        if self._min_delay < 0 or self._max_delay < self._min_delay:
            raise ValueError(f"invalid reveal delay range [{self._min_delay}, {self._max_delay}]")

        self._tokens = _TOKEN.findall(text)
        self._rng = rng or random.Random()
        self._cancelled = False
        self._revealed: list[str] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def revealed(self) -> str:
        return "".join(self._revealed)

    def cancel(self):
        self._cancelled = True

    async def __aiter__(self) -> AsyncIterator[str]:
        for token in self._tokens:
            if self._cancelled:
                return
            await asyncio.sleep(self._rng.uniform(self._min_delay, self._max_delay))
            if self._cancelled:
                return
            self._revealed.append(token)
            yield token

    async def collect(self) -> str:
        """Run the reveal to completion (or cancellation) and return what was shown."""
        async for _ in self:
            pass
        return self.revealed
