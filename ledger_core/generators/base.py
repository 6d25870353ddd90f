"""Base generator class for all ledger generators."""

from __future__ import annotations

import random
from abc import ABC

from ledger_core.generators.pool import FakerPool


class BaseGenerator(ABC):
    """Base class for all data generators.

    Provides common initialization: seed-based reproducibility and a
    shared FakerPool that holds every Faker-generated value.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``hr_HR``).
    pool : FakerPool | None
        Pre-generated value pool. Generators sharing one pool share its
        uuid stream, which keeps ids unique across entity types.
    """

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "hr_HR",
        pool: FakerPool | None = None,
    ) -> None:
        self.pool = pool or FakerPool(locale=locale, seed=seed)
        if seed is not None:
            random.seed(seed)
