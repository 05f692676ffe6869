"""Agent profile details used for the dashboard greeting."""

from typing import Optional

from pydantic import BaseModel

ROLE_TYPE_LABELS = {
    "agent": "Insurance Agent",
    "underwriter": "Underwriter",
    "senior_underwriter": "Senior Underwriter",
    "broker": "Insurance Broker",
    "mgaStaff": "MGA Staff",
    "other": "Insurance Professional",
}

SPECIALTY_LABELS = {
    # Product specialties
    "workers_comp": "Workers' Compensation",
    "commercial_auto": "Commercial Auto Insurance",
    "professional_liability": "Professional Liability",
    "cyber": "Cyber Insurance",
    "general_liability": "General Liability",
    "property": "Property Insurance",
    # Regional specialties
    "northeast": "Northeast Region",
    "southeast": "Southeast Region",
    "midwest": "Midwest Region",
    "west": "Western Region",
    "southwest": "Southwest Region",
}


class AgentProfile(BaseModel):
    """Signed-in agent as reported by the identity provider."""
    display_name: Optional[str] = None
    role_type: Optional[str] = None
    specialty: Optional[str] = None


def format_role_type(role_type: Optional[str]) -> str:
    return ROLE_TYPE_LABELS.get(role_type or "", "Insurance Professional")


def format_specialty(specialty: Optional[str]) -> str:
    if not specialty:
        return "All Regions"
    return SPECIALTY_LABELS.get(specialty, specialty)


def first_name(display_name: Optional[str]) -> str:
    if not display_name or not display_name.strip():
        return "User"
    return display_name.split()[0]


def greeting(profile: AgentProfile) -> str:
    """Welcome line for the dashboard header."""
    return f"Welcome back, {first_name(profile.display_name)}"
