"""
Approval Engine Tests
Rule matching, specificity and step merging
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from procurement.models import notification, vendor  # noqa: F401  relationship targets
from procurement.models.approval_rule import ApprovalRule
from procurement.models.requisition import Requisition, RequisitionItem, ItemCategory
from procurement.models.user import User, UserRole
from procurement.services.approval_engine import approval_engine


def make_requisition(total, cost_center="IT-OPS-001", categories=(ItemCategory.IT,), steps=None, trail=None):
    """Build a transient requisition whose items add up to ``total``"""
    items = [
        RequisitionItem(
            description=f"Item {index}",
            quantity=1,
            uom="unit",
            unit_price=total / len(categories),
            currency="IDR",
            category=category
        )
        for index, category in enumerate(categories)
    ]
    requisition = Requisition(
        req_no="PR-TEST-0001",
        department="IT",
        cost_center=cost_center,
        items=items,
        approval_steps=steps or [],
        approval_trail=trail or []
    )
    requisition.total = requisition.calculate_total()
    return requisition


def make_rule(name, roles, amount_gte=None, category=None, cost_center=None):
    return ApprovalRule(
        name=name,
        amount_gte=amount_gte,
        category=category,
        cost_center=cost_center,
        steps=[{"order": index, "role": role} for index, role in enumerate(roles, start=1)]
    )


DEMO_RULES = [
    make_rule("Default approval up to 50M", ["approver", "procurement_admin"], amount_gte=0),
    make_rule("High value requires finance", ["approver", "finance", "procurement_admin"], amount_gte=100_000_000),
    make_rule("IT Cost Center special rule", ["approver", "finance"], category="IT", cost_center="IT-OPS-001"),
]


def roles(steps):
    return [step["role"] for step in steps]


class TestRuleMatching:
    """Test matches_rule"""

    def test_amount_threshold_is_inclusive(self):
        rule = make_rule("Threshold", ["finance"], amount_gte=100_000_000)
        assert approval_engine.matches_rule(rule, make_requisition(100_000_000))
        assert not approval_engine.matches_rule(rule, make_requisition(99_999_999))

    def test_category_matches_any_item(self):
        rule = make_rule("Office", ["approver"], category="Office")
        requisition = make_requisition(10_000_000, categories=(ItemCategory.IT, ItemCategory.OFFICE))
        assert approval_engine.matches_rule(rule, requisition)
        assert not approval_engine.matches_rule(rule, make_requisition(10_000_000))

    def test_cost_center_must_be_exact(self):
        rule = make_rule("Cost center", ["approver"], cost_center="IT-OPS-001")
        assert approval_engine.matches_rule(rule, make_requisition(1, cost_center="IT-OPS-001"))
        assert not approval_engine.matches_rule(rule, make_requisition(1, cost_center="IT-OPS-0011"))

    def test_all_conditions_must_hold(self):
        rule = make_rule("Both", ["finance"], amount_gte=50_000_000, cost_center="FAC-202")
        assert not approval_engine.matches_rule(rule, make_requisition(60_000_000, cost_center="OPS-110"))
        assert not approval_engine.matches_rule(rule, make_requisition(40_000_000, cost_center="FAC-202"))
        assert approval_engine.matches_rule(rule, make_requisition(60_000_000, cost_center="FAC-202"))

    def test_rule_without_conditions_never_matches(self):
        rule = make_rule("Empty", ["finance"])
        assert not approval_engine.matches_rule(rule, make_requisition(1))
        assert approval_engine.condition_weight(rule) == 0

    def test_zero_amount_condition_counts(self):
        rule = make_rule("Zero", ["approver"], amount_gte=0)
        assert approval_engine.condition_weight(rule) == 1
        assert approval_engine.matches_rule(rule, make_requisition(0))


class TestStepEvaluation:
    """Test evaluate with the demo rule set and custom rules"""

    def test_no_rules_gives_single_approver(self):
        assert approval_engine.evaluate(make_requisition(1_000_000), []) == [{"order": 1, "role": "approver"}]

    def test_no_matching_rule_gives_single_approver(self):
        rules = [make_rule("Big", ["finance"], amount_gte=1_000_000_000)]
        assert approval_engine.evaluate(make_requisition(1_000_000), rules) == [{"order": 1, "role": "approver"}]

    def test_most_specific_rule_wins(self):
        # IT rule sets two conditions and beats both amount rules
        steps = approval_engine.evaluate(make_requisition(275_000_000), DEMO_RULES)
        assert steps == [{"order": 1, "role": "approver"}, {"order": 2, "role": "finance"}]

    def test_equal_weight_rules_are_merged(self):
        requisition = make_requisition(135_000_000, cost_center="FAC-202", categories=(ItemCategory.OFFICE,))
        steps = approval_engine.evaluate(requisition, DEMO_RULES)
        assert steps == [
            {"order": 1, "role": "approver"},
            {"order": 2, "role": "finance"},
            {"order": 3, "role": "procurement_admin"},
        ]

    def test_below_high_value_threshold(self):
        requisition = make_requisition(60_000_000, cost_center="OPS-110", categories=(ItemCategory.LOGISTICS,))
        assert roles(approval_engine.evaluate(requisition, DEMO_RULES)) == ["approver", "procurement_admin"]

    def test_evaluation_does_not_depend_on_rule_order(self):
        requisition = make_requisition(135_000_000, cost_center="FAC-202", categories=(ItemCategory.OFFICE,))
        assert approval_engine.evaluate(requisition, DEMO_RULES) == approval_engine.evaluate(
            requisition, list(reversed(DEMO_RULES))
        )

    def test_repeated_evaluation_gives_same_steps(self):
        requisition = make_requisition(135_000_000, cost_center="FAC-202", categories=(ItemCategory.OFFICE,))
        rule_steps = [list(rule.steps) for rule in DEMO_RULES]

        first = approval_engine.evaluate(requisition, DEMO_RULES)
        second = approval_engine.evaluate(requisition, DEMO_RULES)

        assert first == second
        assert [rule.steps for rule in DEMO_RULES] == rule_steps


class TestStepNormalization:
    """Test normalize_steps"""

    def test_duplicate_role_keeps_lowest_order(self):
        steps = approval_engine.normalize_steps([
            {"order": 3, "role": "finance"},
            {"order": 1, "role": "finance"},
            {"order": 2, "role": "approver"},
        ])
        assert steps == [{"order": 1, "role": "finance"}, {"order": 2, "role": "approver"}]

    def test_ties_on_order_sort_by_role(self):
        steps = approval_engine.normalize_steps([
            {"order": 1, "role": "procurement_admin"},
            {"order": 1, "role": "finance"},
        ])
        assert roles(steps) == ["finance", "procurement_admin"]

    def test_renumbered_without_gaps(self):
        steps = approval_engine.normalize_steps([
            {"order": 5, "role": "approver"},
            {"order": 9, "role": "finance"},
        ])
        assert [step["order"] for step in steps] == [1, 2]

    def test_empty_candidates_fall_back_to_approver(self):
        assert approval_engine.normalize_steps([]) == [{"order": 1, "role": "approver"}]


class TestPendingStep:
    """Test get_pending_step and can_user_approve"""

    STEPS = [{"order": 1, "role": "approver"}, {"order": 2, "role": "finance"}]

    def test_first_unapproved_step(self):
        requisition = make_requisition(1, steps=self.STEPS, trail=[
            {"step": 0, "role": "employee", "action": "submitted", "at": "2024-01-01T00:00:00"},
            {"step": 1, "role": "approver", "action": "approved", "at": "2024-01-02T00:00:00"},
        ])
        assert approval_engine.get_pending_step(requisition) == {"order": 2, "role": "finance"}

    def test_returned_entries_do_not_count_as_approval(self):
        requisition = make_requisition(1, steps=self.STEPS, trail=[
            {"step": 1, "role": "approver", "action": "returned", "at": "2024-01-02T00:00:00"},
        ])
        assert approval_engine.get_pending_step(requisition) == {"order": 1, "role": "approver"}

    def test_approval_must_match_order_and_role(self):
        requisition = make_requisition(1, steps=self.STEPS, trail=[
            {"step": 2, "role": "approver", "action": "approved", "at": "2024-01-02T00:00:00"},
        ])
        assert approval_engine.get_pending_step(requisition)["order"] == 1

    def test_no_pending_step_when_all_approved_or_no_steps(self):
        requisition = make_requisition(1, steps=self.STEPS, trail=[
            {"step": 1, "role": "approver", "action": "approved", "at": "2024-01-02T00:00:00"},
            {"step": 2, "role": "finance", "action": "approved", "at": "2024-01-03T00:00:00"},
        ])
        assert approval_engine.get_pending_step(requisition) is None
        assert approval_engine.get_pending_step(make_requisition(1)) is None

    @pytest.mark.parametrize("role,expected", [
        (UserRole.APPROVER, True),
        (UserRole.FINANCE, False),
        (UserRole.PROCUREMENT_ADMIN, False),
    ])
    def test_can_user_approve(self, role, expected):
        requisition = make_requisition(1, steps=self.STEPS)
        user = User(email="someone@example.com", full_name="Someone", role=role)
        assert approval_engine.can_user_approve(user, requisition) is expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
