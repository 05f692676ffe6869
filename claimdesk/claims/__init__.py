"""
Claims module.

Claim schema, risk rules, the claim filing workflow and tracking helpers.
"""

from .exceptions import ClaimError, ImmutableFieldError, SubmissionInProgressError
from .processing import ClaimProcessor
from .profile import AgentProfile, greeting
from .risk import (
    calculate_payment_amount,
    decide,
    determine_risk_level,
    generate_reference_number,
)
from .samples import sample_claims
from .schema import (
    # Enums
    ClaimType,
    ClaimStatus,
    PaymentStatus,
    RiskLevel,
    # Models
    ClaimantInfo,
    Claim,
    ClaimFormData,
    ClaimResult,
)
from .tracking import ClaimSummary, search_claims, status_message, summarize_claims

__all__ = [
    # Workflow
    "ClaimProcessor",
    "decide",
    "determine_risk_level",
    "generate_reference_number",
    "calculate_payment_amount",
    # Tracking
    "search_claims",
    "status_message",
    "summarize_claims",
    "ClaimSummary",
    "sample_claims",
    # Profile
    "AgentProfile",
    "greeting",
    # Errors
    "ClaimError",
    "ImmutableFieldError",
    "SubmissionInProgressError",
    # Enums
    "ClaimType",
    "ClaimStatus",
    "PaymentStatus",
    "RiskLevel",
    # Models
    "ClaimantInfo",
    "Claim",
    "ClaimFormData",
    "ClaimResult",
]
