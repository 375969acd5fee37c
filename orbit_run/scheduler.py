"""Deferred one-shot effects driven by simulation time.

Effects are fire-and-forget: they cannot be cancelled individually, only
dropped wholesale with :meth:`EffectScheduler.clear`. Each effect may carry a
tag (the game state it was issued under); when it comes due under a different
tag it is discarded instead of run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable

logger = logging.getLogger(__name__)


@dataclass(order=True)
class DeferredEffect:
    due: float
    seq: int
    action: Callable[[], Any] = field(compare=False)
    tag: Hashable | None = field(default=None, compare=False)
    label: str = field(default="", compare=False)


class EffectScheduler:
    """Queue of delayed callbacks advanced once per frame."""

    def __init__(self) -> None:
        self.clock = 0.0
        self._pending: list[DeferredEffect] = []
        self._seq = 0

    def __len__(self) -> int:
        return len(self._pending)

    def schedule(
        self,
        delay: float,
        action: Callable[[], Any],
        *,
        tag: Hashable | None = None,
        label: str = "",
    ) -> None:
        """Run action once, ``delay`` seconds of simulation time from now."""
        self._seq += 1
        self._pending.append(DeferredEffect(self.clock + max(0.0, delay), self._seq, action, tag, label))
        self._pending.sort()

    def advance(self, dt: float, current_tag: Hashable | None = None) -> int:
        """Move the clock forward and fire everything now due.

        Returns the number of effects that actually ran.
        """
        self.clock += dt
        fired = 0
        while self._pending and self._pending[0].due <= self.clock:
            effect = self._pending.pop(0)
            if effect.tag is not None and effect.tag != current_tag:
                logger.debug("Dropping deferred %s: issued under %s, now %s", effect.label, effect.tag, current_tag)
                continue
            effect.action()
            fired += 1
        return fired

    def clear(self) -> None:
        self._pending.clear()
