"""
Exercise Routes - API endpoints for the exercise library.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from auth import get_current_user
from models import ExerciseRequest
from models_orm import UserORM
from service_modules.exercise_service import ExerciseService, get_exercise_service

router = APIRouter()


def require_trainer(user: UserORM):
    if user.role not in ("trainer", "admin"):
        raise HTTPException(status_code=403, detail="Only trainers can access this endpoint")


@router.get("/api/exercises")
async def get_exercises(
    search: Optional[str] = None,
    muscle_group: Optional[str] = None,
    equipment: Optional[str] = None,
    difficulty: Optional[str] = None,
    service: ExerciseService = Depends(get_exercise_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Get all exercises accessible to the current trainer."""
    require_trainer(current_user)
    return service.get_exercises(current_user.id, search, muscle_group, equipment, difficulty)


@router.post("/api/exercises")
async def create_exercise(
    exercise: ExerciseRequest,
    service: ExerciseService = Depends(get_exercise_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Create a new personal exercise."""
    require_trainer(current_user)
    return service.create_exercise(exercise.model_dump(), current_user.id)


@router.get("/api/exercises/filters")
async def get_exercise_filters(
    service: ExerciseService = Depends(get_exercise_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Muscle groups, equipment and difficulties to filter the library by."""
    require_trainer(current_user)
    return service.get_filter_options()


@router.get("/api/exercises/{exercise_id}")
async def get_exercise(
    exercise_id: str,
    service: ExerciseService = Depends(get_exercise_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.get_exercise(exercise_id, current_user.id)


@router.delete("/api/exercises/{exercise_id}")
async def delete_exercise(
    exercise_id: str,
    service: ExerciseService = Depends(get_exercise_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Delete a personal exercise."""
    require_trainer(current_user)
    return service.delete_exercise(exercise_id, current_user.id)
