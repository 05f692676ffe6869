"""
Claim filing workflow.

Tracks the multi-step claim form, then simulates the claim decision:
risk classification, automated approval or referral, after a fixed
latency. One form instance handles one submission at a time.
"""

import asyncio
import logging
import os
import random
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Iterable, List, Optional, Union

from pydantic.alias_generators import to_camel

from ..utils.config import get_settings
from .exceptions import SubmissionInProgressError
from .risk import decide, parse_amount
from .schema import (
    Claim,
    ClaimantInfo,
    ClaimFormData,
    ClaimResult,
    ClaimStatus,
    PaymentStatus,
    RiskLevel,
)

if TYPE_CHECKING:
    from ..storage.claim_store import ClaimStore

logger = logging.getLogger(__name__)


# Fields that must be filled before the form can move past each step.
# Step 3 (documents) is checked separately.
STEP_REQUIRED_FIELDS = {
    1: ("policy_number", "claim_type"),
    2: ("incident_date", "description", "estimated_amount"),
}
DOCUMENTS_STEP = 3

FORM_FIELDS = {
    name: name for name in ClaimFormData.model_fields if name != "documents"
}
FORM_FIELDS.update({to_camel(name): name for name in list(FORM_FIELDS)})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _file_name(file: Any) -> str:
    """Display name of an uploaded file (path, str or file-like object)."""
    if isinstance(file, (str, os.PathLike)):
        return Path(file).name
    for attr in ("filename", "name"):
        name = getattr(file, attr, None)
        if name:
            return Path(str(name)).name
    return str(file)


class ClaimProcessor:
    """
    State and decision logic behind the claim filing page.

    Usage:
        processor = ClaimProcessor()
        processor.update_field("policy_number", "POL-984632")
        processor.update_field("claim_type", "property")
        ...
        processor.add_files(["photo1.jpg"])

        if processor.is_form_valid(3):
            result = await processor.submit()
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utcnow,
        delay: Optional[float] = None,
        approval_rate: Optional[float] = None,
    ):
        """
        Initialize an empty claim form.

        Args:
            rng: Entropy source for reference numbers and approval draws
            clock: Returns the current time (review dates, submission time)
            delay: Simulated decision latency in seconds (default from settings)
            approval_rate: Automated approval share (default from settings)
        """
        settings = get_settings()
        self.rng = rng or random.Random()
        self.clock = clock
        self.delay = settings.processing_delay_seconds if delay is None else delay
        self.approval_rate = settings.approval_rate if approval_rate is None else approval_rate

        self.form_data = ClaimFormData()
        self.uploaded_files: List[str] = []
        self.claim_result: Optional[ClaimResult] = None
        self.is_processing = False

    # ------------------------------------------------------------------
    # Form state
    # ------------------------------------------------------------------

    def reset_form(self) -> None:
        """Clear the form, uploaded files, decision and processing flag."""
        self.form_data = ClaimFormData()
        self.uploaded_files = []
        self.claim_result = None
        self.is_processing = False

    def update_field(self, name: str, value: Any) -> None:
        """
        Merge one form field into the form state.

        Args:
            name: Form field name (snake_case or camelCase)
            value: Entered value; None clears the field
        """
        field_name = FORM_FIELDS.get(name)
        if field_name is None:
            raise ValueError(f"Unknown form field: {name}")
        if isinstance(value, Enum):
            value = value.value
        setattr(self.form_data, field_name, "" if value is None else str(value))

    def add_files(self, files: Union[Iterable[Any], str, os.PathLike]) -> None:
        """Append uploaded files and their names; a single path counts as one file."""
        if isinstance(files, (str, os.PathLike)):
            files = [files]
        new_files = list(files)
        self.form_data.documents = [*self.form_data.documents, *new_files]
        self.uploaded_files = [*self.uploaded_files, *(_file_name(f) for f in new_files)]

    def remove_file(self, index: int) -> None:
        """Remove an uploaded file and its name by position."""
        if not 0 <= index < len(self.uploaded_files):
            return

        documents = list(self.form_data.documents)
        del documents[index]
        self.form_data.documents = documents
        del self.uploaded_files[index]

    def get_missing_fields(self, step: int) -> List[str]:
        """
        Return names of the fields still empty for a form step.

        Returns:
            Field names; ["documents"] for step 3 without uploads
        """
        if step == DOCUMENTS_STEP:
            return [] if self.form_data.documents else ["documents"]

        required = STEP_REQUIRED_FIELDS.get(step, ())
        return [name for name in required if not getattr(self.form_data, name)]

    def is_form_valid(self, step: int) -> bool:
        """Check whether a step's required fields are all present."""
        if step not in STEP_REQUIRED_FIELDS and step != DOCUMENTS_STEP:
            return False
        return not self.get_missing_fields(step)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit(self) -> ClaimResult:
        """
        Submit the claim and wait for the simulated decision.

        The decision uses the form values as they were when submit() was
        called. Exactly one result is produced per call; there is no way
        to cancel a pending submission.

        Raises:
            SubmissionInProgressError: if this form already has a
                submission in flight
        """
        if self.is_processing:
            raise SubmissionInProgressError("Claim submission already in progress")

        amount = self.form_data.estimated_amount
        claim_type = self.form_data.claim_type

        self.is_processing = True
        logger.info(f"Processing claim for policy {self.form_data.policy_number or '(none)'}")
        try:
            await asyncio.sleep(self.delay)
            result = decide(
                amount,
                claim_type,
                rng=self.rng,
                clock=self.clock,
                approval_rate=self.approval_rate,
            )
            self.claim_result = result
        finally:
            self.is_processing = False

        logger.info(
            f"Claim {result.reference_number} decided: "
            f"{'approved' if result.approved else 'referred'} "
            f"(risk={result.risk_level.value})"
        )
        return result

    def build_claim(
        self,
        result: Optional[ClaimResult] = None,
        submitted_at: Optional[datetime] = None,
    ) -> Claim:
        """
        Merge the form and a decision into a claim record.

        Args:
            result: Decision to use (defaults to the latest one)
            submitted_at: Submission time (defaults to now)

        Returns:
            Claim ready to add to the store
        """
        result = result or self.claim_result
        if result is None:
            raise ValueError("No claim decision available; submit the form first")

        form = self.form_data
        claimant = None
        if form.contact_phone or form.contact_email:
            claimant = ClaimantInfo(
                phone=form.contact_phone or None,
                email=form.contact_email or None,
            )

        return Claim(
            reference_number=result.reference_number,
            policy_number=form.policy_number,
            claim_type=form.claim_type,
            date_submitted=submitted_at or self.clock(),
            description=form.description,
            amount=str(parse_amount(form.estimated_amount)),
            status=ClaimStatus.APPROVED if result.approved else ClaimStatus.UNDER_REVIEW,
            payment_status=result.payment_status or PaymentStatus.PENDING,
            payment_amount=result.payment_amount,
            risk_level=result.risk_level or RiskLevel.MEDIUM,
            documents=list(self.uploaded_files),
            next_steps=list(result.next_steps),
            claimant_info=claimant,
        )

    async def submit_and_store(self, store: "ClaimStore") -> Claim:
        """Submit the form and add the resulting claim to a store."""
        result = await self.submit()
        claim = self.build_claim(result)
        store.add_claim(claim)
        return claim
