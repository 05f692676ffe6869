"""
Claim store.

Keeps the dashboard's claim collection in memory, seeded with the sample
claims, and mirrors the whole collection to key-value storage after every
change.
"""

import json
import logging
from functools import lru_cache
from typing import Any, Iterable, Iterator, List, Optional

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from ..claims.exceptions import ImmutableFieldError
from ..claims.samples import sample_claims
from ..claims.schema import Claim, ClaimStatus, PaymentStatus
from ..utils.config import get_settings
from .backends import KeyValueStorage, SQLiteStorage

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "claims"

# Set once at submission
IMMUTABLE_FIELDS = ("reference_number", "risk_level")


class ClaimStore:
    """
    Ordered in-memory claim collection with write-through persistence.

    Usage:
        store = ClaimStore(MemoryStorage())

        # Add a claim
        store.add_claim(claim)

        # Retrieve
        claim = store.get_claim("CLM-385721")

        # Partial update
        store.update_claim("CLM-385721", {"status": "paid"})

    On initialization the persisted claims are read and the sample claims
    are appended after them, without de-duplication. The resulting
    collection is written back straight away, so samples pile up across
    reloads.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_STORAGE_KEY,
        samples: Optional[Iterable[Claim]] = None,
    ):
        """Initialize the store from storage plus the sample set."""
        self.storage = storage
        self.key = key

        seed = list(samples) if samples is not None else sample_claims()
        self._claims: List[Claim] = self._load() + seed
        logger.info(f"Claim store initialized with {len(self._claims)} claim(s)")
        self._persist()

    def _load(self) -> List[Claim]:
        """Read persisted claims; missing or corrupt data counts as none."""
        raw = self.storage.get_item(self.key)
        if raw is None:
            return []

        try:
            records = json.loads(raw)
            if not isinstance(records, list):
                raise ValueError(f"expected a list, got {type(records).__name__}")
            return [Claim.model_validate(record) for record in records]
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable claims under '{self.key}': {e}")
            return []

    def _persist(self) -> None:
        """Serialize the whole collection to storage."""
        payload = json.dumps([claim.to_record() for claim in self._claims])
        self.storage.set_item(self.key, payload)
        logger.debug(f"Persisted {len(self._claims)} claim(s) under '{self.key}'")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_claim(self, claim: Claim) -> None:
        """
        Append a claim and persist.

        Reference numbers are not checked for uniqueness here.
        """
        self._claims.append(claim)
        logger.info(f"Added claim {claim.reference_number} ({claim.status.value})")
        self._persist()

    def update_claim(self, reference_number: str, fields: dict) -> bool:
        """
        Shallow-merge fields into every claim with this reference number.

        Args:
            reference_number: Claim reference
            fields: Partial claim fields, snake_case or camelCase keys

        Returns:
            True if any claim was updated, False if none matched

        Raises:
            ImmutableFieldError: if fields try to change the reference
                number or risk level
            ValueError: on unknown field names
        """
        changes = self._normalize_fields(fields)

        updated = False
        merged_claims = []
        for claim in self._claims:
            if claim.reference_number == reference_number:
                data = claim.model_dump()
                data.update(changes)
                claim = Claim.model_validate(data)
                updated = True
            merged_claims.append(claim)

        if not updated:
            return False

        self._claims = merged_claims
        logger.info(f"Updated claim {reference_number}: {sorted(changes)}")
        self._persist()
        return True

    def delete_claim(self, reference_number: str) -> int:
        """
        Remove all claims with this reference number.

        Returns:
            Number of claims removed
        """
        kept = [c for c in self._claims if c.reference_number != reference_number]
        removed = len(self._claims) - len(kept)
        self._claims = kept
        if removed:
            logger.info(f"Deleted {removed} claim(s) with reference {reference_number}")
        self._persist()
        return removed

    def _normalize_fields(self, fields: dict) -> dict:
        """Map camelCase keys to field names and guard immutable fields."""
        aliases = {to_camel(name): name for name in Claim.model_fields}

        changes = {}
        for key, value in fields.items():
            name = key if key in Claim.model_fields else aliases.get(key)
            if name is None:
                raise ValueError(f"Unknown claim field: {key}")
            if name in IMMUTABLE_FIELDS:
                raise ImmutableFieldError(name)
            changes[name] = value
        return changes

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_claim(self, reference_number: str) -> Optional[Claim]:
        """
        Retrieve a claim by reference number.

        Returns:
            The first matching Claim or None if not found
        """
        return next(
            (c for c in self._claims if c.reference_number == reference_number),
            None,
        )

    @property
    def claims(self) -> List[Claim]:
        """Snapshot of the collection, in insertion order."""
        return list(self._claims)

    def list_claims(
        self,
        status: Optional[Any] = None,
        payment_status: Optional[Any] = None,
    ) -> List[Claim]:
        """
        List claims with optional filtering.

        Args:
            status: Filter by claim status
            payment_status: Filter by payment status

        Returns:
            List of Claim objects in insertion order
        """
        claims = self._claims
        if status:
            claims = [c for c in claims if c.status == ClaimStatus(status)]
        if payment_status:
            claims = [c for c in claims if c.payment_status == PaymentStatus(payment_status)]
        return list(claims)

    def count(self, status: Optional[Any] = None) -> int:
        """Count claims, optionally by status."""
        return len(self.list_claims(status=status))

    def __len__(self) -> int:
        return len(self._claims)

    def __iter__(self) -> Iterator[Claim]:
        return iter(list(self._claims))


# =============================================================================
# Convenience Functions
# =============================================================================

@lru_cache
def get_claim_store() -> ClaimStore:
    """Get the default claim store (singleton)."""
    settings = get_settings()
    logger.info(f"Opening claim storage: {settings.storage_path}")
    return ClaimStore(SQLiteStorage(settings.storage_path), key=settings.storage_key)


def add_claim(claim: Claim) -> None:
    """Add a claim to the default store."""
    get_claim_store().add_claim(claim)


def get_claim(reference_number: str) -> Optional[Claim]:
    """Get a claim from the default store."""
    return get_claim_store().get_claim(reference_number)


def update_claim(reference_number: str, fields: dict) -> bool:
    """Update a claim in the default store."""
    return get_claim_store().update_claim(reference_number, fields)


def delete_claim(reference_number: str) -> int:
    """Delete a claim from the default store."""
    return get_claim_store().delete_claim(reference_number)


def list_claims(**kwargs) -> List[Claim]:
    """List claims from the default store."""
    return get_claim_store().list_claims(**kwargs)
