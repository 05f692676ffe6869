"""Shared fixtures for claimdesk tests."""

import random
from datetime import datetime, timezone

import pytest

from claimdesk.claims.processing import ClaimProcessor
from claimdesk.claims.schema import Claim
from claimdesk.storage import ClaimStore, MemoryStorage

FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class FixedDraw:
    """Entropy source with a fixed approval draw and seeded reference numbers."""

    def __init__(self, draw: float, seed: int = 42):
        self.draw = draw
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self.draw

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)


# Draws that force each branch of the automated decision at the default 0.7 rate
APPROVE_DRAW = 0.95
DECLINE_DRAW = 0.05


def make_claim(reference_number: str = "CLM-100001", **overrides) -> Claim:
    """Build a valid claim with sensible defaults."""
    data = {
        "reference_number": reference_number,
        "policy_number": "POL-123456",
        "claim_type": "auto",
        "date_submitted": FIXED_NOW,
        "description": "Rear-end collision at a stop light",
        "amount": "1000",
        "status": "approved",
        "payment_status": "processing",
        "payment_amount": "850.00",
        "risk_level": "low",
        "documents": ["photo1.jpg"],
        "next_steps": ["Payment of $850.00 will be processed"],
    }
    data.update(overrides)
    return Claim(**data)


def fill_form(processor: ClaimProcessor, amount: str = "1000", claim_type: str = "auto") -> None:
    """Complete all three steps of the claim form."""
    processor.update_field("policy_number", "POL-123456")
    processor.update_field("claim_type", claim_type)
    processor.update_field("incident_date", "2025-02-28")
    processor.update_field("description", "Rear-end collision at a stop light")
    processor.update_field("estimated_amount", amount)
    processor.update_field("contact_email", "jane@example.com")
    processor.add_files(["photo1.jpg"])


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return ClaimStore(storage)


@pytest.fixture
def empty_store(storage):
    """Store without the sample claims."""
    return ClaimStore(storage, samples=[])


@pytest.fixture
def make_processor():
    """Factory for processors with zero delay and a fixed clock."""

    def _make(draw: float = APPROVE_DRAW, **kwargs) -> ClaimProcessor:
        kwargs.setdefault("delay", 0)
        kwargs.setdefault("approval_rate", 0.7)
        return ClaimProcessor(rng=FixedDraw(draw), clock=lambda: FIXED_NOW, **kwargs)

    return _make
