"""
Claim schema for the agent dashboard.

Defines Pydantic models for stored claims, the claim-filing form and the
decision returned by the processing simulator. Records serialize with
camelCase keys so the persisted collection keeps the dashboard's format.
"""

import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


REFERENCE_NUMBER_PATTERN = re.compile(r"^CLM-\d{6}$")


# ============================================================================
# Enums
# ============================================================================


class ClaimType(str, Enum):
    """Line of business the claim is filed against."""
    PROPERTY = "property"
    LIABILITY = "liability"
    WORKERS_COMP = "workers_comp"
    AUTO = "auto"
    PROFESSIONAL = "professional"
    CYBER = "cyber"


class ClaimStatus(str, Enum):
    """Review status of a claim."""
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    ADDITIONAL_INFO = "additional_info"
    APPROVED = "approved"
    DENIED = "denied"
    PAID = "paid"


class PaymentStatus(str, Enum):
    """State of funds disbursement, independent of review status."""
    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"
    FAILED = "failed"


class RiskLevel(str, Enum):
    """Coarse severity derived from claim amount and type."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# ============================================================================
# Stored Claim
# ============================================================================


class _CamelModel(BaseModel):
    """Base model accepting both snake_case and camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_record(self) -> dict:
        """Serialize to the camelCase JSON-compatible record."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ClaimantInfo(_CamelModel):
    """Claimant contact details."""
    name: Optional[str] = Field(None, description="Claimant full name")
    email: Optional[str] = Field(None, description="Contact email address")
    phone: Optional[str] = Field(None, description="Contact phone number")


class Claim(_CamelModel):
    """
    A claim record as tracked by the dashboard.

    Identified by its reference number. Risk level is fixed at submission.
    """

    reference_number: str = Field(description="Generated reference, e.g. CLM-385721")
    policy_number: str = Field(description="Policy the claim is filed against")
    claim_type: ClaimType
    date_submitted: datetime
    description: str = ""
    amount: str = Field(description="Claimed amount as a decimal string")
    status: ClaimStatus = ClaimStatus.SUBMITTED
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_date: Optional[datetime] = None
    payment_amount: Optional[str] = None
    risk_level: RiskLevel
    documents: Optional[List[str]] = None
    next_steps: Optional[List[str]] = None
    claimant_info: Optional[ClaimantInfo] = None

    @field_validator("reference_number")
    @classmethod
    def validate_reference_number(cls, v: str) -> str:
        """Ensure reference number is not empty."""
        if not v or not v.strip():
            raise ValueError("reference_number cannot be empty")
        return v.strip()

    @field_validator("amount", "payment_amount", mode="before")
    @classmethod
    def validate_decimal_string(cls, v: Any) -> Optional[str]:
        """Amounts are kept as strings but must parse as finite decimals."""
        if v is None:
            return v
        try:
            value = Decimal(str(v))
        except InvalidOperation:
            raise ValueError(f"Not a decimal amount: {v!r}")
        if not value.is_finite():
            raise ValueError(f"Not a finite amount: {v!r}")
        return str(v)

    @property
    def amount_value(self) -> Decimal:
        """Claimed amount as a Decimal."""
        return Decimal(self.amount)


# ============================================================================
# Claim Form & Decision
# ============================================================================


class ClaimFormData(BaseModel):
    """
    Values collected by the multi-step claim-filing form.

    Everything is free text until submission; claim_type may be empty.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    policy_number: str = ""
    claim_type: str = ""
    incident_date: str = ""
    description: str = ""
    estimated_amount: str = ""
    contact_phone: str = ""
    contact_email: str = ""
    documents: List[Any] = Field(default_factory=list, description="Uploaded file handles")


class ClaimResult(_CamelModel):
    """Decision produced by the claim processing simulator."""

    approved: bool
    reference_number: str
    message: str
    next_steps: List[str] = Field(default_factory=list)
    payment_amount: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    risk_level: Optional[RiskLevel] = None
    review_date: Optional[datetime] = None
