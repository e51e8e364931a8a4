"""
Approval Rule Service
Configuration of the rules that decide a requisition's approval steps
"""

from sqlalchemy.orm import Session
from typing import List

from procurement.models.approval_rule import ApprovalRule
from procurement.models.user import User
from procurement.repositories.approval_rule_repository import ApprovalRuleRepository
from procurement.schemas.approval import ApprovalRuleCreate
from procurement.utils.exceptions import NotFoundError, ValidationError
from procurement.utils.logger import setup_logger, log_audit

logger = setup_logger()


class ApprovalRuleService:
    """Service for approval rule CRUD"""

    def list_rules(self, db: Session) -> List[ApprovalRule]:
        return ApprovalRuleRepository(db).list()

    def get_rule(self, db: Session, rule_id: int) -> ApprovalRule:
        rule = ApprovalRuleRepository(db).get(rule_id)
        if not rule:
            raise NotFoundError("Approval rule not found")
        return rule

    def create_rule(self, db: Session, data: ApprovalRuleCreate, user: User) -> ApprovalRule:
        """
        Create an approval rule

        Steps are numbered 1..n in the order they were given.

        Raises:
            ValidationError: No condition, no step, or a role listed twice
        """
        self._validate(data)
        repo = ApprovalRuleRepository(db)

        rule = ApprovalRule()
        self._apply(rule, data)
        repo.save(rule)
        repo.commit()
        db.refresh(rule)

        log_audit(user.id, "create_approval_rule", f"{rule.name} conditions={rule.conditions}")
        return rule

    def update_rule(self, db: Session, rule_id: int, data: ApprovalRuleCreate, user: User) -> ApprovalRule:
        repo = ApprovalRuleRepository(db)
        rule = self.get_rule(db, rule_id)
        self._validate(data)

        self._apply(rule, data)
        repo.save(rule)
        repo.commit()
        db.refresh(rule)

        log_audit(user.id, "update_approval_rule", f"{rule.name} conditions={rule.conditions}")
        return rule

    def delete_rule(self, db: Session, rule_id: int, user: User) -> str:
        repo = ApprovalRuleRepository(db)
        rule = self.get_rule(db, rule_id)
        name = rule.name
        repo.delete(rule)
        repo.commit()

        log_audit(user.id, "delete_approval_rule", name)
        return name

    def _validate(self, data: ApprovalRuleCreate):
        conditions = data.conditions
        if conditions.amount_gte is None and conditions.category is None and conditions.cost_center is None:
            raise ValidationError("Specify at least one condition")
        if not data.steps:
            raise ValidationError("Add at least one approval step")

        roles = [step.role.value for step in data.steps]
        if len(set(roles)) != len(roles):
            raise ValidationError("Each role can appear only once in the approval steps")

    def _apply(self, rule: ApprovalRule, data: ApprovalRuleCreate):
        rule.name = data.name
        rule.amount_gte = data.conditions.amount_gte
        rule.category = data.conditions.category.value if data.conditions.category else None
        rule.cost_center = data.conditions.cost_center.strip() if data.conditions.cost_center else None
        rule.steps = [
            {"order": index, "role": step.role.value}
            for index, step in enumerate(data.steps, start=1)
        ]


# Create singleton instance
approval_rule_service = ApprovalRuleService()
