"""Pre-generated value pools for fast ledger data generation.

Replaces per-call Faker invocations with O(1) random.choice() lookups
from pre-populated pools.  Croatian identifiers (OIB, IBAN) are built
with plain check-digit arithmetic instead of Faker.

Usage::

    pool = FakerPool(seed=42)
    name = pool.company()       # random.choice from 500 company names
    uid  = pool.uuid()          # batch-generated via os.urandom
    oib  = pool.oib()           # pre-validated OIB from pool
"""

from __future__ import annotations

import os
import random
import uuid as _uuid

from faker import Faker

# Croatian bank codes (VBDI) used as the first 7 digits of the BBAN
HR_BANK_CODES = {
    "2402006": "Erste & Steiermärkische Bank",
    "2484008": "Raiffeisenbank Austria",
    "2340009": "Privredna banka Zagreb",
    "2360000": "Zagrebačka banka",
    "2407000": "OTP banka",
    "2390001": "Hrvatska poštanska banka",
    "2500009": "Addiko Bank",
}


class UUIDPool:
    """Batch-generated UUIDs using os.urandom for minimal syscall overhead.

    Parameters
    ----------
    batch_size : int
        Number of UUIDs to generate per batch (default 8192).
    """

    __slots__ = ("_batch_size", "_pool", "_index", "_rng")

    def __init__(self, batch_size: int = 8192, seed: int | None = None) -> None:
        self._batch_size = batch_size
        self._pool: list[str] = []
        self._index = 0
        # Seeded runs draw bytes from a private generator so ids repeat
        self._rng = random.Random(seed) if seed is not None else None
        self._refill()

    def _refill(self) -> None:
        """Generate a new batch of UUIDs."""
        if self._rng is not None:
            raw = self._rng.randbytes(16 * self._batch_size)
        else:
            raw = os.urandom(16 * self._batch_size)
        self._pool = [
            _uuid.UUID(bytes=raw[i : i + 16], version=4).hex
            for i in range(0, len(raw), 16)
        ]
        self._index = 0

    def next(self) -> str:
        """Return next UUID hex string, refilling pool when exhausted."""
        if self._index >= len(self._pool):
            self._refill()
        val = self._pool[self._index]
        self._index += 1
        return val


def oib_check_digit(digits: str) -> int:
    """ISO 7064 MOD 11,10 check digit over the first 10 OIB digits."""
    remainder = 10
    for ch in digits:
        remainder = (remainder + int(ch)) % 10
        if remainder == 0:
            remainder = 10
        remainder = (remainder * 2) % 11
    check = 11 - remainder
    return 0 if check == 10 else check


def _generate_oib() -> str:
    """Generate a valid Croatian OIB (11 digits)."""
    digits = "".join(str(random.randint(0, 9)) for _ in range(10))
    return f"{digits}{oib_check_digit(digits)}"


def hr_iban_check_digits(bban: str) -> str:
    """Two mod-97 check digits of a Croatian IBAN for ``bban``."""
    # "HR" moves to the end as 17 27, check digits as 00
    remainder = int(f"{bban}172700") % 97
    return f"{98 - remainder:02d}"


def _generate_iban(bank_code: str) -> str:
    """Generate a valid Croatian IBAN (HRkk + 7-digit bank + 10-digit account)."""
    account = "".join(str(random.randint(0, 9)) for _ in range(10))
    bban = f"{bank_code}{account}"
    return f"HR{hr_iban_check_digits(bban)}{bban}"


class FakerPool:
    """Pre-generated pools of Faker values for fast random selection.

    Parameters
    ----------
    locale : str
        Faker locale (default ``hr_HR``).
    seed : int | None
        Random seed for reproducibility.
    pool_sizes : dict[str, int] | None
        Override default pool sizes per field.
    """

    DEFAULT_SIZES: dict[str, int] = {
        "company": 500,
        "oib": 2000,
    }

    def __init__(
        self,
        locale: str = "hr_HR",
        seed: int | None = None,
        pool_sizes: dict[str, int] | None = None,
    ) -> None:
        sizes = {**self.DEFAULT_SIZES, **(pool_sizes or {})}
        fake = Faker(locale)
        if seed is not None:
            fake.seed_instance(seed)
            random.seed(seed)

        self._companies: list[str] = [fake.company() for _ in range(sizes["company"])]

        # OIB: fast arithmetic generator
        self._oibs: list[str] = [_generate_oib() for _ in range(sizes["oib"])]

        self._uuid_pool = UUIDPool(seed=seed)

    # --- Public accessors (O(1) random.choice) ---

    def uuid(self) -> str:
        """Return a unique UUID4 hex string."""
        return self._uuid_pool.next()

    def company(self) -> str:
        """Return a random company name."""
        return random.choice(self._companies)

    def oib(self) -> str:
        """Return a random valid OIB (11 digits)."""
        return random.choice(self._oibs)

    def bank_code(self) -> str:
        """Return a random Croatian bank code."""
        return random.choice(list(HR_BANK_CODES))

    def iban(self, bank_code: str | None = None) -> str:
        """Return a fresh valid Croatian IBAN, optionally at a given bank."""
        return _generate_iban(bank_code or self.bank_code())
