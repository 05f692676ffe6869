"""Built-in sample claims shown on a fresh dashboard."""

from typing import List

from .schema import Claim

SAMPLE_CLAIM_RECORDS = [
    {
        "referenceNumber": "CLM-385721",
        "policyNumber": "POL-984632",
        "claimType": "property",
        "dateSubmitted": "2025-02-20T09:30:00Z",
        "description": "Water damage from pipe burst in office space",
        "amount": "12500.00",
        "status": "approved",
        "paymentStatus": "paid",
        "paymentDate": "2025-02-27T14:20:00Z",
        "paymentAmount": "10625.00",
        "riskLevel": "medium",
    },
    {
        "referenceNumber": "CLM-429856",
        "policyNumber": "POL-984632",
        "claimType": "liability",
        "dateSubmitted": "2025-02-22T11:15:00Z",
        "description": "Customer slip and fall in retail store",
        "amount": "25000.00",
        "status": "under_review",
        "paymentStatus": "pending",
        "riskLevel": "high",
    },
    {
        "referenceNumber": "CLM-657423",
        "policyNumber": "POL-775132",
        "claimType": "professional",
        "dateSubmitted": "2025-02-18T15:40:00Z",
        "description": "Alleged errors in professional services provided to client",
        "amount": "18750.00",
        "status": "additional_info",
        "paymentStatus": "pending",
        "riskLevel": "high",
    },
]


def sample_claims() -> List[Claim]:
    """Fresh Claim objects for the sample set."""
    return [Claim.model_validate(record) for record in SAMPLE_CLAIM_RECORDS]
