"""
Risk classification and claim decision rules.

Pure functions: the entropy source and clock are passed in, so the same
inputs always give the same tier and tests can force either branch of the
automated approval.
"""

import math
import random
import re
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Callable, Optional, Union

from .schema import ClaimResult, ClaimType, PaymentStatus, RiskLevel

# Per claim type weighting of the claimed amount
CLAIM_TYPE_RISK_MULTIPLIERS = {
    ClaimType.CYBER: Decimal("1.5"),
    ClaimType.PROFESSIONAL: Decimal("1.3"),
    ClaimType.LIABILITY: Decimal("1.2"),
    ClaimType.WORKERS_COMP: Decimal("1.1"),
    ClaimType.PROPERTY: Decimal("1.0"),
    ClaimType.AUTO: Decimal("0.9"),
}
DEFAULT_RISK_MULTIPLIER = Decimal("1.0")

HIGH_RISK_THRESHOLD = Decimal("15000")
MEDIUM_RISK_THRESHOLD = Decimal("5000")

PAYOUT_RATIO = Decimal("0.85")
DEFAULT_APPROVAL_RATE = 0.7
REVIEW_PERIOD = timedelta(days=7)

REFERENCE_MIN = 100000
REFERENCE_MAX = 999999

# Largest amount the decision rules work with
MAX_AMOUNT = Decimal("999999999999.99")

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")

HIGH_RISK_STEPS = [
    "Our claims team will review your submission",
    "You may be contacted for additional information",
    "You'll receive a decision within 5-7 business days",
]

DECLINED_STEPS = [
    "A claims adjuster will contact you within 24 hours",
    "Please have any additional documentation ready",
    "You can check your claim status anytime",
]


def parse_amount(value: Union[str, int, float, Decimal, None]) -> Decimal:
    """
    Parse an entered amount leniently.

    Reads the leading number the way a browser number field does
    ("1200.50 USD" -> 1200.50). Anything without a leading number is zero.
    Magnitudes beyond MAX_AMOUNT, including infinities, are clamped to it.
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal) or (isinstance(value, float) and not math.isfinite(value)):
        number = Decimal(value)
    else:
        match = _LEADING_NUMBER.match(str(value))
        if not match:
            return Decimal("0")
        text = match.group(0).strip()
        try:
            number = Decimal(text)
        except InvalidOperation:
            # Exponent out of range: overflows to infinity or underflows to zero
            number = Decimal(float(text))

    if number.is_nan():
        return Decimal("0")
    return max(-MAX_AMOUNT, min(number, MAX_AMOUNT))


def get_risk_multiplier(claim_type: Union[ClaimType, str, None]) -> Decimal:
    """Multiplier for a claim type; unknown or empty types weigh 1.0."""
    if not claim_type:
        return DEFAULT_RISK_MULTIPLIER
    try:
        return CLAIM_TYPE_RISK_MULTIPLIERS[ClaimType(claim_type)]
    except ValueError:
        return DEFAULT_RISK_MULTIPLIER


def determine_risk_level(amount, claim_type) -> RiskLevel:
    """
    Classify a claim by its type-weighted amount.

    Thresholds are strict: exactly 15000 is medium, exactly 5000 is low.
    """
    adjusted = parse_amount(amount) * get_risk_multiplier(claim_type)

    if adjusted > HIGH_RISK_THRESHOLD:
        return RiskLevel.HIGH
    if adjusted > MEDIUM_RISK_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def generate_reference_number(rng: Optional[random.Random] = None) -> str:
    """Generate a claim reference number, CLM- followed by six digits."""
    rng = rng or random
    return f"CLM-{rng.randint(REFERENCE_MIN, REFERENCE_MAX)}"


def calculate_payment_amount(amount) -> str:
    """Automated payout: 85% of the claimed amount, two decimals."""
    payout = parse_amount(amount) * PAYOUT_RATIO
    return str(payout.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def decide(
    amount,
    claim_type,
    rng: Optional[random.Random] = None,
    clock: Callable[[], datetime] = _utcnow,
    approval_rate: float = DEFAULT_APPROVAL_RATE,
) -> ClaimResult:
    """
    Produce the claim decision.

    High risk claims always go to manual review with a target date seven
    days out. Low and medium risk claims are approved automatically with
    probability ``approval_rate``; the rest are routed to an adjuster.

    Args:
        amount: Estimated amount as entered on the form
        claim_type: Claim type value (may be empty)
        rng: Entropy source for the reference number and approval draw
        clock: Returns the submission time
        approval_rate: Share of low/medium risk claims approved

    Returns:
        ClaimResult for the submission
    """
    rng = rng or random.Random()
    risk_level = determine_risk_level(amount, claim_type)
    reference_number = generate_reference_number(rng)

    if risk_level == RiskLevel.HIGH:
        return ClaimResult(
            approved=False,
            reference_number=reference_number,
            risk_level=risk_level,
            message="Your claim requires additional review by our team.",
            next_steps=list(HIGH_RISK_STEPS),
            payment_status=PaymentStatus.PENDING,
            review_date=clock() + REVIEW_PERIOD,
        )

    if rng.random() > 1 - approval_rate:
        payment_amount = calculate_payment_amount(amount)
        return ClaimResult(
            approved=True,
            reference_number=reference_number,
            risk_level=risk_level,
            payment_amount=payment_amount,
            message="Your claim has been automatically approved.",
            next_steps=[
                f"Payment of ${payment_amount} will be processed",
                "You'll receive payment within 3-5 business days",
                "You can track your claim status anytime",
            ],
            payment_status=PaymentStatus.PROCESSING,
        )

    return ClaimResult(
        approved=False,
        reference_number=reference_number,
        risk_level=risk_level,
        message="We were unable to automatically approve your claim.",
        next_steps=list(DECLINED_STEPS),
        payment_status=PaymentStatus.PENDING,
    )
