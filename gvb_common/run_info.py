"""Run identity shared across layers."""

from __future__ import annotations

import random
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone

RUN_ID_CHARSET = string.ascii_lowercase + string.digits
RUN_ID_LENGTH = 4


def generate_run_id(
    length: int = RUN_ID_LENGTH, rng: random.Random | None = None
) -> str:
    """Return a short random token used to namespace this run's volumes."""
    rng = rng or random.Random()
    return "".join(rng.choice(RUN_ID_CHARSET) for _ in range(length))


@dataclass(frozen=True)
class RunInfo:
    """Identity of a single harness run and the instance it targets."""

    run_id: str
    project: str
    zone: str
    instance: str
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
