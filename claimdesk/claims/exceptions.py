"""Exceptions raised by the claim processing and claim store modules."""


class ClaimError(Exception):
    """Base class for claimdesk errors."""


class SubmissionInProgressError(ClaimError, RuntimeError):
    """A claim form was submitted again while its decision is still pending."""


class ImmutableFieldError(ClaimError, ValueError):
    """An update tried to change a field fixed at submission time."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Field '{field_name}' cannot be changed after submission")
