"""
Approval Engine
Rule matching and step merging for requisition approvals
"""

from typing import Dict, List, Optional, Sequence

from procurement.models.approval_rule import ApprovalRule, ApprovalRole
from procurement.models.requisition import Requisition, TrailAction
from procurement.utils.logger import setup_logger

logger = setup_logger()

DEFAULT_STEPS = [{"order": 1, "role": ApprovalRole.APPROVER.value}]


class ApprovalEngine:
    """
    Selects approval steps for a requisition

    A rule matches when every condition it sets holds. Among matching
    rules only the most specific ones (most conditions set) are used; their
    steps are merged by (order, role) with the first occurrence of each role
    kept and renumbered from 1.
    """

    def matches_rule(self, rule: ApprovalRule, requisition: Requisition) -> bool:
        """
        Check whether all of a rule's conditions hold for a requisition

        A rule without conditions never matches.
        """
        if not rule.conditions:
            return False

        if rule.amount_gte is not None and requisition.total < rule.amount_gte:
            return False

        if rule.category and not requisition.has_category(rule.category):
            return False

        if rule.cost_center and requisition.cost_center != rule.cost_center:
            return False

        return True

    def condition_weight(self, rule: ApprovalRule) -> int:
        """Number of conditions a rule sets"""
        return len(rule.conditions)

    def select_rules(
        self,
        requisition: Requisition,
        rules: Sequence[ApprovalRule]
    ) -> List[ApprovalRule]:
        """
        Return the matching rules with the highest specificity weight

        Ties are all kept.
        """
        matched = [rule for rule in rules if self.matches_rule(rule, requisition)]
        if not matched:
            return []

        max_weight = max(self.condition_weight(rule) for rule in matched)
        return [rule for rule in matched if self.condition_weight(rule) == max_weight]

    def normalize_steps(self, steps: Sequence[Dict]) -> List[Dict]:
        """
        Merge candidate steps into an ordered, role-unique list

        Sort key is (order, role name); the first step seen for a role wins.
        """
        unique_roles: Dict[str, Dict] = {}

        for step in sorted(steps, key=lambda item: (item["order"], item["role"])):
            unique_roles.setdefault(step["role"], step)

        ordered = [
            {"order": index, "role": step["role"]}
            for index, step in enumerate(unique_roles.values(), start=1)
        ]

        return ordered or [dict(step) for step in DEFAULT_STEPS]

    def evaluate(self, requisition: Requisition, rules: Sequence[ApprovalRule]) -> List[Dict]:
        """
        Compute approval steps for a requisition against a rule set

        Args:
            requisition: Requisition with items and total populated
            rules: Full configured rule set

        Returns:
            List of {"order", "role"} dicts; a single approver step when no
            rule matches
        """
        prioritized = self.select_rules(requisition, rules)

        if not prioritized:
            logger.debug(f"No approval rule matched {requisition.req_no}, using default approver step")
            return [dict(step) for step in DEFAULT_STEPS]

        merged = [step for rule in prioritized for step in (rule.steps or [])]
        steps = self.normalize_steps(merged)

        logger.debug(
            f"Requisition {requisition.req_no} matched rules "
            f"{[rule.name for rule in prioritized]} -> {[step['role'] for step in steps]}"
        )
        return steps

    def get_pending_step(self, requisition: Requisition) -> Optional[Dict]:
        """
        First approval step without a matching "approved" trail entry

        Returns:
            Step dict, or None when there are no steps or all are approved
        """
        steps = requisition.approval_steps or []
        if not steps:
            return None

        approved = {
            (event.get("step"), event.get("role"))
            for event in requisition.approval_trail or []
            if event.get("action") == TrailAction.APPROVED.value
        }

        return next(
            (step for step in steps if (step["order"], step["role"]) not in approved),
            None
        )

    def can_user_approve(self, user, requisition: Requisition) -> bool:
        """Check if a user's role matches the requisition's pending step"""
        if user is None:
            return False
        pending = self.get_pending_step(requisition)
        if not pending:
            return False
        role = user.role.value if hasattr(user.role, "value") else user.role
        return pending["role"] == role


# Create singleton instance
approval_engine = ApprovalEngine()
