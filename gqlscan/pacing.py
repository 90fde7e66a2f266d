"""Fixed pacing between sequential remote calls."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, TypeVar

from .config import PacingConfig
from .logging import get_logger

T = TypeVar("T")

logger = get_logger("pacing")


@dataclass
class PacingPolicy:
    """Waits ``interval`` seconds (plus up to ``jitter``) between consecutive calls.

    The delay is constant: it does not react to rate-limit responses. Calls
    are never issued in parallel, so ``max_concurrency`` must stay at 1.
    """

    interval: float = 10.0
    jitter: float = 0.0
    max_concurrency: int = 1
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)
    uniform: Callable[[float, float], float] = field(default=random.uniform, repr=False)

    def __post_init__(self) -> None:
        if self.interval < 0 or self.jitter < 0:
            raise ValueError("interval and jitter must not be negative")
        if self.max_concurrency != 1:
            raise ValueError("Only sequential pacing (max_concurrency=1) is supported")

    @classmethod
    def from_config(cls, config: PacingConfig, **overrides: object) -> "PacingPolicy":
        params: dict[str, object] = {"interval": config.interval, "jitter": config.jitter}
        params.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**params)  # type: ignore[arg-type]

    def next_delay(self) -> float:
        if self.jitter:
            return self.interval + self.uniform(0.0, self.jitter)
        return self.interval

    def wait(self, label: str | None = None) -> None:
        delay = self.next_delay()
        if delay <= 0:
            return
        if label:
            logger.info("Waiting %g seconds before analyzing %s...", delay, label)
        else:
            logger.info("Waiting %g seconds before the next request...", delay)
        self.sleep(delay)

    def paced(self, items: Iterable[T], *, label: Callable[[T], str] | None = None) -> Iterator[T]:
        """Yield ``items`` in order, waiting between consecutive items but not after the last."""
        first = True
        for item in items:
            if not first:
                self.wait(label(item) if label else None)
            first = False
            yield item


__all__ = ["PacingPolicy"]
