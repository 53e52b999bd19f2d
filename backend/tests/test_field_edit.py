"""
Tests for the approximate recalculation after a single field edit.
"""
import pytest

from backend.job_rollup.field_edit import (
    FieldEditInput,
    apply_field_edit,
    estimate_projected_hours,
    recalculate_field_edit,
    resolve_order_value,
)
from backend.job_rollup.rollup_engine import process_job


class TestProjectedHours:

    def test_extrapolated_from_progress(self):
        assert estimate_projected_hours(planned_hours=30, actual_hours=20, progress=50) == pytest.approx(40)

    @pytest.mark.parametrize("progress", [0, 100, 120, -5])
    def test_progress_outside_open_range_uses_planned(self, progress):
        assert estimate_projected_hours(30, 20, progress) == 30

    def test_no_actual_hours_uses_planned(self):
        assert estimate_projected_hours(30, 0, 50) == 30


class TestOrderValue:

    def test_net_price_times_quantity(self):
        assert resolve_order_value(50, 100, 999) == 5000

    def test_direct_value_when_price_incomplete(self):
        assert resolve_order_value(50, None, 999) == 999
        assert resolve_order_value(None, None, None) is None


class TestRecalculateFieldEdit:

    def test_derived_metrics(self):
        result = recalculate_field_edit({"planned_hours": 30, "actual_hours": 20, "progress": 50})
        assert result["projected_hours"] == pytest.approx(40)
        assert result["planned_cost"] == pytest.approx(30 * 199)
        assert result["actual_cost"] == pytest.approx(20 * 199)
        assert result["projected_cost"] == pytest.approx(40 * 199)
        assert result["order_value"] is None
        assert result["profit_value"] is None
        assert result["margin"] is None

    def test_profit_and_margin(self):
        result = recalculate_field_edit({"planned_hours": 10, "net_price": 50, "quantity": 100})
        assert result["order_value"] == 5000
        assert result["projected_cost"] == pytest.approx(1990)
        assert result["profit_value"] == pytest.approx(3010)
        assert result["margin"] == pytest.approx(60.2)

    def test_zero_order_value(self):
        result = recalculate_field_edit({"planned_hours": 1, "order_value": 0})
        assert result["profit_value"] == pytest.approx(-199)
        assert result["margin"] is None

    def test_reduced_rate_fields(self):
        result = recalculate_field_edit({"planned_hours": 10, "work_center": "REP ENG"})
        assert result["planned_cost"] == 100

    def test_malformed_input_defaults_to_zero(self):
        result = recalculate_field_edit({"planned_hours": "abc", "actual_hours": None, "progress": "n/a"})
        assert result["projected_hours"] == 0
        assert result["projected_cost"] == 0

    def test_unrelated_keys_passed_through(self):
        result = recalculate_field_edit({"job_number": "J-9", "customer": "ACME", "planned_hours": 2})
        assert result["job_number"] == "J-9"
        assert result["customer"] == "ACME"

    def test_empty_input(self):
        assert recalculate_field_edit({})["projected_hours"] == 0

    def test_not_reconciled_with_operation_rollup(self, today):
        """The scalar path trusts the typed progress; the rollup uses hours."""
        rolled = process_job({
            "work_orders": [{"operations": [{"operation_number": 10, "planned_hours": 10, "actual_hours": 5}]}],
        }, today=today)
        edited = recalculate_field_edit({"planned_hours": 10, "actual_hours": 5, "progress": 25})
        assert rolled.projected_hours == pytest.approx(10)
        assert edited["projected_hours"] == pytest.approx(20)


class TestApplyFieldEdit:

    def test_recalculates_for_hour_fields(self):
        job = {"job_number": "J-1", "planned_hours": 10, "actual_hours": 4, "progress": 0}
        updated = apply_field_edit(job, "progress", 40)
        assert updated["progress"] == 40
        assert updated["projected_hours"] == pytest.approx(10)

    def test_other_fields_not_recalculated(self):
        job = {"job_number": "J-1", "planned_hours": 10}
        updated = apply_field_edit(job, "title", "Pump overhaul")
        assert updated == {"job_number": "J-1", "planned_hours": 10, "title": "Pump overhaul"}

    def test_original_fields_not_mutated(self):
        job = {"planned_hours": 10}
        apply_field_edit(job, "planned_hours", 12)
        assert job == {"planned_hours": 10}


class TestFieldEditCoercion:
    """Every field read by the recalculator tolerates malformed input."""

    @pytest.mark.parametrize("field,value", [
        ("planned_hours", "abc"),
        ("planned_hours", None),
        ("planned_hours", True),
        ("actual_hours", "abc"),
        ("actual_hours", False),
        ("progress", "half"),
        ("progress", None),
    ])
    def test_numeric_fields_default_to_zero(self, field, value):
        parsed = FieldEditInput.model_validate({field: value})
        assert getattr(parsed, field) == 0.0

    @pytest.mark.parametrize("field", ["work_center", "task_description", "part_name"])
    def test_text_fields_default_to_empty(self, field):
        parsed = FieldEditInput.model_validate({field: None})
        assert getattr(parsed, field) == ""

    @pytest.mark.parametrize("field", ["net_price", "quantity", "order_value"])
    @pytest.mark.parametrize("value,expected", [
        ("abc", 0.0),
        (True, 0.0),
        ("12.5", 12.5),
        (None, None),
        ("", None),
    ])
    def test_optional_numbers(self, field, value, expected):
        parsed = FieldEditInput.model_validate({field: value})
        assert getattr(parsed, field) == expected

    def test_non_numeric_net_price(self):
        result = recalculate_field_edit({"planned_hours": 1, "net_price": "abc", "quantity": 100})
        assert result["order_value"] == 0
        assert result["profit_value"] == pytest.approx(-199)
        assert result["margin"] is None

    def test_non_numeric_quantity(self):
        result = recalculate_field_edit({"planned_hours": 1, "net_price": 50, "quantity": "many"})
        assert result["order_value"] == 0

    def test_non_numeric_order_value(self):
        result = recalculate_field_edit({"planned_hours": 1, "order_value": "n/a"})
        assert result["order_value"] == 0
        assert result["profit_value"] == pytest.approx(-199)

    def test_missing_net_price_falls_back_to_order_value(self):
        result = recalculate_field_edit({"net_price": None, "quantity": 5, "order_value": "1000"})
        assert result["order_value"] == 1000

    def test_reduced_rate_with_missing_text(self):
        result = recalculate_field_edit({"planned_hours": 10, "work_center": None, "part_name": "Admin"})
        assert result["planned_cost"] == 100
