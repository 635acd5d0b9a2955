"""Choose which records a drill presents and in what order."""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence

from .parser import QuestionRecord

__all__ = [
    "sample",
    "sample_indices",
]

logger = logging.getLogger(__name__)


def sample_indices(
    record_count: int,
    requested: int,
    rng: Optional[random.Random] = None,
) -> list[int]:
    """Return ``requested`` indices into a set of ``record_count`` records.

    The first ``min(requested, record_count)`` indices are distinct, drawn
    with a partial Fisher-Yates shuffle. Any indices beyond ``record_count``
    are drawn uniformly with replacement from the full range, so the tail
    may repeat items from the fresh pass.
    """

    if record_count <= 0 or requested <= 0:
        return []

    randrange = rng.randrange if rng is not None else random.randrange
    fresh = min(requested, record_count)
    overflow = requested - fresh

    try:
        slots = list(range(record_count))
    except MemoryError:
        logger.error(
            "Unable to allocate sampling buffer",
            extra={"records": record_count, "requested": requested},
        )
        return []

    order: list[int] = []
    for i in range(fresh):
        j = randrange(i, record_count)
        slots[i], slots[j] = slots[j], slots[i]
        order.append(slots[i])

    for _ in range(overflow):
        order.append(randrange(record_count))

    logger.debug(
        "Sampled drill order",
        extra={"records": record_count, "fresh": fresh, "overflow": overflow},
    )
    return order


def sample(
    records: Sequence[QuestionRecord],
    requested: int,
    rng: Optional[random.Random] = None,
) -> list[int]:
    """Sample indices into ``records``; see :func:`sample_indices`."""

    return sample_indices(len(records), requested, rng)
