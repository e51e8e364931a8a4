"""
Budget Routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from procurement.config.database import get_db
from procurement.services.auth_service import auth_service
from procurement.services.budget_service import budget_service
from procurement.schemas.budget import BudgetSummaryResponse
from procurement.models.user import User

router = APIRouter()


@router.get("")
async def list_budgets(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """
    Budgets with committed usage and remaining amount

    Usage counts submitted and approved requisitions plus active purchase
    orders linked to requisitions of the same cost center.
    """
    return {
        "budgets": [
            BudgetSummaryResponse(**summary)
            for summary in budget_service.list_budget_summaries(db)
        ]
    }


@router.get("/{cost_center}", response_model=BudgetSummaryResponse)
async def get_budget(
    cost_center: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    return budget_service.get_budget_summary(db, cost_center)
