"""
Route sampling for spatial provider queries.

Long routes are thinned to a roughly uniform, order-preserving subset so the
number of query clauses stays bounded. Short routes are used as-is.
"""
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, TypeVar

from poi_engine.config import get_settings

T = TypeVar("T")


@dataclass(frozen=True)
class SamplingPolicy:
    """Thresholds controlling how aggressively a route is thinned."""
    min_points: int = 100   # routes shorter than this are not sampled
    ratio: float = 0.25     # fraction of points to keep on long routes
    min_samples: int = 5    # floor on the target count

    @classmethod
    def from_settings(cls) -> "SamplingPolicy":
        settings = get_settings()
        return cls(
            min_points=settings.sampler_min_points,
            ratio=settings.sampler_ratio,
            min_samples=settings.sampler_min_samples,
        )

    def step_for(self, n: int) -> int:
        """Index stride for a route of n points (1 means keep everything)."""
        if n < self.min_points:
            return 1
        target = max(self.min_samples, math.floor(n * self.ratio))
        return max(1, n // target)


def sample(coords: Sequence[T], policy: Optional[SamplingPolicy] = None) -> List[T]:
    """
    Return every step-th point of coords, starting at index 0.

    Deterministic and order-preserving; the returned items are the input
    items themselves.
    """
    policy = policy or SamplingPolicy.from_settings()
    step = policy.step_for(len(coords))
    if step == 1:
        return list(coords)
    return [point for i, point in enumerate(coords) if i % step == 0]
