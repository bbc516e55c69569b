"""
Workout Plan Routes - API endpoints for workout plan management.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from auth import get_current_user
from models import WorkoutPlanRequest, WorkoutPlanExercise, AssignPlanRequest
from models_orm import UserORM
from service_modules.workout_plan_service import WorkoutPlanService, get_workout_plan_service

router = APIRouter(prefix="/api/workout-plans")


def require_trainer(user: UserORM):
    if user.role not in ("trainer", "admin"):
        raise HTTPException(status_code=403, detail="Only trainers can access this endpoint")


@router.get("")
async def get_workout_plans(
    search: Optional[str] = None,
    category: Optional[str] = None,
    difficulty: Optional[str] = None,
    muscle_group: Optional[str] = None,
    equipment: Optional[str] = None,
    mine: bool = False,
    service: WorkoutPlanService = Depends(get_workout_plan_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Own and public plans, filtered."""
    require_trainer(current_user)
    return service.get_plans(current_user.id, search, category, difficulty, muscle_group, equipment, mine)


@router.get("/templates")
async def get_templates(
    service: WorkoutPlanService = Depends(get_workout_plan_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.get_templates()


@router.post("")
async def create_workout_plan(
    plan: WorkoutPlanRequest,
    service: WorkoutPlanService = Depends(get_workout_plan_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.create_plan(plan.model_dump(), current_user.id)


@router.get("/{plan_id}")
async def get_workout_plan(
    plan_id: str,
    service: WorkoutPlanService = Depends(get_workout_plan_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Plan details with the referenced exercises filled in."""
    require_trainer(current_user)
    return service.get_plan(plan_id, current_user.id)


@router.put("/{plan_id}")
async def update_workout_plan(
    plan_id: str,
    plan: WorkoutPlanRequest,
    service: WorkoutPlanService = Depends(get_workout_plan_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.update_plan(plan_id, plan.model_dump(exclude_unset=True), current_user.id)


@router.delete("/{plan_id}")
async def delete_workout_plan(
    plan_id: str,
    service: WorkoutPlanService = Depends(get_workout_plan_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.delete_plan(plan_id, current_user.id)


@router.post("/{plan_id}/duplicate")
async def duplicate_workout_plan(
    plan_id: str,
    service: WorkoutPlanService = Depends(get_workout_plan_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.duplicate_plan(plan_id, current_user.id)


@router.post("/{plan_id}/assign")
async def assign_workout_plan(
    plan_id: str,
    assignment: AssignPlanRequest,
    service: WorkoutPlanService = Depends(get_workout_plan_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Replace the plan's client assignments."""
    require_trainer(current_user)
    return service.assign_plan(plan_id, assignment.client_ids, current_user.id)


# --- EXERCISES INSIDE A PLAN ---

@router.post("/{plan_id}/exercises")
async def add_plan_exercise(
    plan_id: str,
    entry: WorkoutPlanExercise,
    service: WorkoutPlanService = Depends(get_workout_plan_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.add_exercise(plan_id, entry.model_dump(), current_user.id)


@router.delete("/{plan_id}/exercises/{index}")
async def remove_plan_exercise(
    plan_id: str,
    index: int,
    service: WorkoutPlanService = Depends(get_workout_plan_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.remove_exercise(plan_id, index, current_user.id)


@router.post("/{plan_id}/exercises/{index}/move")
async def move_plan_exercise(
    plan_id: str,
    index: int,
    direction: str,
    service: WorkoutPlanService = Depends(get_workout_plan_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Swap an exercise with its neighbour (direction=up|down)."""
    require_trainer(current_user)
    return service.move_exercise(plan_id, index, direction, current_user.id)
