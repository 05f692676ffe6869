"""
Claim tracking helpers.

Search, display labels and roll-up figures for the claim tracking table
and the dashboard overview.
"""

from collections import Counter
from decimal import Decimal
from typing import Dict, Iterable, List

from pydantic import BaseModel, Field

from .risk import parse_amount
from .schema import Claim, ClaimStatus, ClaimType, PaymentStatus


CLAIM_TYPE_LABELS = {
    ClaimType.PROPERTY: "Property Damage",
    ClaimType.LIABILITY: "Liability",
    ClaimType.WORKERS_COMP: "Workers' Compensation",
    ClaimType.AUTO: "Auto",
    ClaimType.PROFESSIONAL: "Professional Liability",
    ClaimType.CYBER: "Cyber Incident",
}

CLAIM_STATUS_LABELS = {
    ClaimStatus.SUBMITTED: "Submitted",
    ClaimStatus.UNDER_REVIEW: "Under Review",
    ClaimStatus.ADDITIONAL_INFO: "Additional Info Required",
    ClaimStatus.APPROVED: "Approved",
    ClaimStatus.DENIED: "Denied",
    ClaimStatus.PAID: "Paid",
}


def _label(labels: dict, enum_cls, value) -> str:
    try:
        return labels[enum_cls(value)]
    except ValueError:
        return str(value)


def format_claim_type(claim_type) -> str:
    """Display label for a claim type; unknown values pass through."""
    return _label(CLAIM_TYPE_LABELS, ClaimType, claim_type)


def format_claim_status(status) -> str:
    """Display label for a claim status; unknown values pass through."""
    return _label(CLAIM_STATUS_LABELS, ClaimStatus, status)


def format_payment_status(payment_status) -> str:
    """Capitalized payment status."""
    value = getattr(payment_status, "value", payment_status)
    return str(value).capitalize()


def search_claims(claims: Iterable[Claim], term: str = "") -> List[Claim]:
    """
    Filter claims by a free-text term.

    Case-insensitive substring match on reference number, policy number,
    claim type or status. An empty term matches everything.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return list(claims)

    return [
        claim for claim in claims
        if needle in claim.reference_number.lower()
        or needle in claim.policy_number.lower()
        or needle in claim.claim_type.value
        or needle in claim.status.value
    ]


def status_message(claim: Claim) -> str:
    """Next-step sentence shown in the claim detail panel."""
    if claim.status == ClaimStatus.APPROVED and claim.payment_status == PaymentStatus.PAID:
        return "Your claim has been approved and payment has been issued."
    if claim.status == ClaimStatus.UNDER_REVIEW:
        return (
            "Your claim is currently under review by our claims team. "
            "You will be notified once a decision is made."
        )
    if claim.status == ClaimStatus.ADDITIONAL_INFO:
        return (
            "We need additional information to process your claim. "
            "Please contact our claims department."
        )
    return "Please contact our claims department for more information."


class ClaimSummary(BaseModel):
    """Roll-up of a claim collection for the dashboard overview."""

    total_claims: int = 0
    by_status: Dict[str, int] = Field(default_factory=dict)
    by_payment_status: Dict[str, int] = Field(default_factory=dict)
    by_risk_level: Dict[str, int] = Field(default_factory=dict)
    total_claimed: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")


def summarize_claims(claims: Iterable[Claim]) -> ClaimSummary:
    """
    Compute dashboard totals.

    total_paid sums payment amounts of claims whose payment status is paid.
    """
    claims = list(claims)
    summary = ClaimSummary(
        total_claims=len(claims),
        by_status=dict(Counter(c.status.value for c in claims)),
        by_payment_status=dict(Counter(c.payment_status.value for c in claims)),
        by_risk_level=dict(Counter(c.risk_level.value for c in claims)),
    )

    for claim in claims:
        summary.total_claimed += parse_amount(claim.amount)
        if claim.payment_status == PaymentStatus.PAID and claim.payment_amount:
            summary.total_paid += parse_amount(claim.payment_amount)

    return summary
