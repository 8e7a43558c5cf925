# backend/app/routers/goals.py
"""
Savings goal endpoints.

- GET    /goals       - List goals with projections
- POST   /goals       - Create goal
- PATCH  /goals/{id}  - Update goal
- DELETE /goals/{id}  - Delete goal

Projections assume flat monthly contributions: no growth, no interest.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_goal_projector, get_portfolio_store
from app.models import Goal
from app.schemas.goals import GoalCreate, GoalResponse, GoalUpdate, ProjectionResponse
from app.services.goals import GoalProjector, YearsMonths
from app.services.portfolio_store import PortfolioStore
from app.services.valuation.types import GoalSpec

router = APIRouter(
    prefix="/goals",
    tags=["Goals"],
)


def _map_goal(goal: Goal, projector: GoalProjector) -> GoalResponse:
    """Map ORM Goal plus its projection to the response schema."""
    spec = GoalSpec(
        id=goal.id,
        name=goal.name,
        target=Decimal(goal.target),
        monthly=Decimal(goal.monthly),
    )
    projection = projector.project(spec)

    if isinstance(projection.years_months, YearsMonths):
        projection_response = ProjectionResponse(
            reachable=True,
            months=int(projection.months),
            years=projection.years_months.years,
            remainder_months=projection.years_months.remainder_months,
        )
    else:
        projection_response = ProjectionResponse(reachable=False)

    return GoalResponse(
        id=goal.id,
        name=goal.name,
        target=goal.target,
        monthly=goal.monthly,
        projection=projection_response,
    )


@router.get(
    "/",
    response_model=list[GoalResponse],
    summary="List goals",
)
def list_goals(
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
        projector: GoalProjector = Depends(get_goal_projector),
) -> list[GoalResponse]:
    return [_map_goal(g, projector) for g in store.list_goals(db)]


@router.post(
    "/",
    response_model=GoalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create goal",
)
def create_goal(
        payload: GoalCreate | None = None,
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
        projector: GoalProjector = Depends(get_goal_projector),
) -> GoalResponse:
    """Create a goal. Without a body it starts as "New goal" at 0 / 0."""
    payload = payload or GoalCreate()
    goal = store.create_goal(db, name=payload.name, target=payload.target, monthly=payload.monthly)
    return _map_goal(goal, projector)


@router.patch(
    "/{goal_id}",
    response_model=GoalResponse,
    summary="Update goal",
)
def update_goal(
        goal_id: str,
        payload: GoalUpdate,
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
        projector: GoalProjector = Depends(get_goal_projector),
) -> GoalResponse:
    """Update a goal. A blank name keeps the current name."""
    goal = store.update_goal(
        db,
        goal_id,
        name=payload.name,
        target=payload.target,
        monthly=payload.monthly,
    )
    return _map_goal(goal, projector)


@router.delete(
    "/{goal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete goal",
)
def delete_goal(
        goal_id: str,
        db: Session = Depends(get_db),
        store: PortfolioStore = Depends(get_portfolio_store),
) -> None:
    store.delete_goal(db, goal_id)
