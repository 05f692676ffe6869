"""
Tests for the claim filing workflow.

Covers form state handling, per-step validation, the asynchronous
submission (including duplicate-submission gating) and building the
stored claim from a decision.
"""

import asyncio
from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from claimdesk.claims.exceptions import SubmissionInProgressError
from claimdesk.claims.processing import ClaimProcessor
from claimdesk.claims.schema import ClaimStatus, ClaimType, PaymentStatus, RiskLevel

from conftest import APPROVE_DRAW, DECLINE_DRAW, FIXED_NOW, fill_form


# ============================================================================
# Form State
# ============================================================================


class TestFormState:

    def test_starts_empty(self, make_processor):
        processor = make_processor()
        assert processor.form_data.policy_number == ""
        assert processor.uploaded_files == []
        assert processor.claim_result is None
        assert processor.is_processing is False

    def test_update_field_snake_and_camel_case(self, make_processor):
        processor = make_processor()
        processor.update_field("policy_number", "POL-1")
        processor.update_field("estimatedAmount", "2500")

        assert processor.form_data.policy_number == "POL-1"
        assert processor.form_data.estimated_amount == "2500"

    def test_update_field_coerces_and_clears(self, make_processor):
        processor = make_processor()
        processor.update_field("estimated_amount", 1200)
        assert processor.form_data.estimated_amount == "1200"

        processor.update_field("estimated_amount", None)
        assert processor.form_data.estimated_amount == ""

    def test_update_field_stores_enum_values(self, make_processor):
        processor = make_processor()
        processor.update_field("claim_type", ClaimType.CYBER)
        assert processor.form_data.claim_type == "cyber"

    def test_update_unknown_field_raises(self, make_processor):
        processor = make_processor()
        with pytest.raises(ValueError):
            processor.update_field("favourite_colour", "blue")
        with pytest.raises(ValueError):
            processor.update_field("documents", "x.pdf")

    def test_add_files_records_names(self, make_processor):
        class Upload:
            filename = "estimate.pdf"

        processor = make_processor()
        processor.add_files(["photos/front.jpg", Path("/tmp/rear.jpg")])
        processor.add_files([Upload()])

        assert processor.uploaded_files == ["front.jpg", "rear.jpg", "estimate.pdf"]
        assert len(processor.form_data.documents) == 3

    def test_add_single_path(self, make_processor):
        processor = make_processor()
        processor.add_files("photos/photo.jpg")
        processor.add_files(Path("estimate.pdf"))

        assert processor.uploaded_files == ["photo.jpg", "estimate.pdf"]
        assert len(processor.form_data.documents) == 2

    def test_remove_file_by_position(self, make_processor):
        processor = make_processor()
        processor.add_files(["a.pdf", "b.pdf", "c.pdf"])

        processor.remove_file(1)

        assert processor.uploaded_files == ["a.pdf", "c.pdf"]
        assert processor.form_data.documents == ["a.pdf", "c.pdf"]

    def test_remove_file_out_of_range_is_noop(self, make_processor):
        processor = make_processor()
        processor.add_files(["a.pdf"])

        processor.remove_file(5)
        processor.remove_file(-1)

        assert processor.uploaded_files == ["a.pdf"]

    def test_reset_form(self, make_processor):
        processor = make_processor()
        fill_form(processor)
        asyncio.run(processor.submit())

        processor.reset_form()

        assert processor.form_data.policy_number == ""
        assert processor.form_data.documents == []
        assert processor.uploaded_files == []
        assert processor.claim_result is None
        assert processor.is_processing is False


# ============================================================================
# Step Validation
# ============================================================================


class TestFormValidation:

    def test_step_one_requires_policy_and_type(self, make_processor):
        processor = make_processor()
        assert not processor.is_form_valid(1)

        processor.update_field("policy_number", "POL-1")
        assert not processor.is_form_valid(1)
        assert processor.get_missing_fields(1) == ["claim_type"]

        processor.update_field("claim_type", "property")
        assert processor.is_form_valid(1)

    def test_step_two_requires_incident_details(self, make_processor):
        processor = make_processor()
        processor.update_field("incident_date", "2025-02-28")
        processor.update_field("description", "Burst pipe")
        assert not processor.is_form_valid(2)
        assert processor.get_missing_fields(2) == ["estimated_amount"]

        processor.update_field("estimated_amount", "5000")
        assert processor.is_form_valid(2)

    def test_step_three_requires_a_document(self, make_processor):
        processor = make_processor()
        assert not processor.is_form_valid(3)

        processor.add_files(["photo.jpg"])
        assert processor.is_form_valid(3)

        processor.remove_file(0)
        assert not processor.is_form_valid(3)

    @pytest.mark.parametrize("step", [0, 4, -1])
    def test_other_steps_are_invalid(self, make_processor, step):
        processor = make_processor()
        fill_form(processor)
        assert processor.is_form_valid(step) is False


# ============================================================================
# Submission
# ============================================================================


class TestSubmit:

    def test_high_risk_submission(self, make_processor):
        processor = make_processor()
        fill_form(processor, amount="20000", claim_type="cyber")

        result = asyncio.run(processor.submit())

        assert result.approved is False
        assert result.risk_level == RiskLevel.HIGH
        assert result.payment_status == PaymentStatus.PENDING
        assert len(result.next_steps) == 3
        assert result.review_date == FIXED_NOW + timedelta(days=7)
        assert processor.claim_result is result
        assert processor.is_processing is False

    def test_low_risk_approved(self, make_processor):
        processor = make_processor(APPROVE_DRAW)
        fill_form(processor, amount="1000", claim_type="auto")

        result = asyncio.run(processor.submit())

        assert result.approved is True
        assert result.payment_amount == "850.00"
        assert result.payment_status == PaymentStatus.PROCESSING

    def test_low_risk_declined(self, make_processor):
        processor = make_processor(DECLINE_DRAW)
        fill_form(processor, amount="1000", claim_type="auto")

        result = asyncio.run(processor.submit())

        assert result.approved is False
        assert result.payment_status == PaymentStatus.PENDING
        assert result.review_date is None

    def test_processing_flag_gates_duplicate_submission(self, make_processor):
        processor = make_processor(delay=0.05)
        fill_form(processor)

        async def scenario():
            first = asyncio.create_task(processor.submit())
            await asyncio.sleep(0)
            assert processor.is_processing is True

            with pytest.raises(SubmissionInProgressError):
                await processor.submit()

            result = await first
            assert processor.is_processing is False
            return result

        result = asyncio.run(scenario())
        assert processor.claim_result is result

    def test_decision_uses_form_values_at_submit_time(self, make_processor):
        processor = make_processor(delay=0.05)
        fill_form(processor, amount="20000", claim_type="cyber")

        async def scenario():
            pending = asyncio.create_task(processor.submit())
            await asyncio.sleep(0)
            processor.update_field("estimated_amount", "10")
            return await pending

        assert asyncio.run(scenario()).risk_level == RiskLevel.HIGH

    def test_independent_forms_submit_concurrently(self, make_processor):
        first = make_processor(APPROVE_DRAW, delay=0.02)
        second = make_processor(DECLINE_DRAW, delay=0.01)
        fill_form(first)
        fill_form(second)

        async def scenario():
            return await asyncio.gather(first.submit(), second.submit())

        result_a, result_b = asyncio.run(scenario())
        assert result_a.approved is True
        assert result_b.approved is False

    def test_each_submit_produces_one_new_result(self, make_processor):
        processor = make_processor()
        fill_form(processor)

        first = asyncio.run(processor.submit())
        second = asyncio.run(processor.submit())

        assert first is not second
        assert processor.claim_result is second

    def test_enum_claim_type_is_weighted(self, make_processor):
        processor = make_processor(APPROVE_DRAW)
        fill_form(processor, amount="12000", claim_type=ClaimType.CYBER)

        result = asyncio.run(processor.submit())

        assert result.risk_level == RiskLevel.HIGH
        assert processor.build_claim(result).claim_type == ClaimType.CYBER

    @pytest.mark.parametrize("amount,risk_level", [
        ("1e1000000", RiskLevel.HIGH),
        ("-1e30", RiskLevel.LOW),
    ])
    def test_extreme_amounts_still_produce_a_result(self, make_processor, amount, risk_level):
        processor = make_processor(APPROVE_DRAW)
        fill_form(processor, amount=amount)

        result = asyncio.run(processor.submit())

        assert result.risk_level == risk_level
        assert processor.claim_result is result
        assert processor.is_processing is False

    def test_default_delay_comes_from_settings(self):
        processor = ClaimProcessor()
        assert processor.delay == 2.0
        assert processor.approval_rate == 0.7


# ============================================================================
# Building Claims
# ============================================================================


class TestBuildClaim:

    def test_approved_claim_record(self, make_processor):
        processor = make_processor(APPROVE_DRAW)
        fill_form(processor)
        result = asyncio.run(processor.submit())

        claim = processor.build_claim()

        assert claim.reference_number == result.reference_number
        assert claim.policy_number == "POL-123456"
        assert claim.claim_type.value == "auto"
        assert claim.date_submitted == FIXED_NOW
        assert claim.amount == "1000"
        assert claim.status == ClaimStatus.APPROVED
        assert claim.payment_status == PaymentStatus.PROCESSING
        assert claim.payment_amount == "850.00"
        assert claim.risk_level == RiskLevel.LOW
        assert claim.documents == ["photo1.jpg"]
        assert claim.next_steps == result.next_steps
        assert claim.claimant_info.email == "jane@example.com"
        assert claim.claimant_info.phone is None

    def test_referred_claim_is_under_review(self, make_processor):
        processor = make_processor()
        fill_form(processor, amount="30000", claim_type="liability")
        asyncio.run(processor.submit())

        claim = processor.build_claim()

        assert claim.status == ClaimStatus.UNDER_REVIEW
        assert claim.payment_status == PaymentStatus.PENDING
        assert claim.payment_amount is None
        assert claim.risk_level == RiskLevel.HIGH

    def test_build_without_decision_raises(self, make_processor):
        processor = make_processor()
        fill_form(processor)
        with pytest.raises(ValueError):
            processor.build_claim()

    def test_build_with_invalid_claim_type_raises(self, make_processor):
        processor = make_processor()
        fill_form(processor, claim_type="marine")
        asyncio.run(processor.submit())

        with pytest.raises(ValidationError):
            processor.build_claim()

    def test_submit_and_store(self, make_processor, empty_store):
        processor = make_processor(APPROVE_DRAW)
        fill_form(processor)

        claim = asyncio.run(processor.submit_and_store(empty_store))

        assert len(empty_store) == 1
        assert empty_store.get_claim(claim.reference_number) == claim
