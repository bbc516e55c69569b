"""
Training Routes - API endpoints for the trainer's calendar.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from auth import get_current_user
from models import TrainingRequest, TrainingUpdateRequest, ConflictCheckRequest
from models_orm import UserORM
from service_modules.training_service import TrainingService, get_training_service

router = APIRouter()


def require_trainer(user: UserORM):
    if user.role not in ("trainer", "admin"):
        raise HTTPException(status_code=403, detail="Only trainers can access this endpoint")


# --- TRAININGS ---

@router.get("/api/trainings")
async def get_trainings(
    client: Optional[str] = None,
    status: Optional[str] = None,
    date: Optional[str] = None,
    service: TrainingService = Depends(get_training_service),
    current_user: UserORM = Depends(get_current_user)
):
    """List trainings, optionally filtered by client name, status and day."""
    require_trainer(current_user)
    return service.get_trainings(current_user.id, client, status, date)


@router.post("/api/trainings")
async def create_training(
    training: TrainingRequest,
    service: TrainingService = Depends(get_training_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.create_training(training.model_dump(), current_user.id)


@router.post("/api/trainings/check-conflict")
async def check_conflict(
    data: ConflictCheckRequest,
    service: TrainingService = Depends(get_training_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Return the first existing training overlapping the proposed slot, if any."""
    require_trainer(current_user)
    return service.check_conflict(current_user.id, data.date, data.start_time, data.duration, data.exclude_id)


@router.get("/api/trainings/{training_id}")
async def get_training(
    training_id: str,
    service: TrainingService = Depends(get_training_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.get_training(training_id, current_user.id)


@router.put("/api/trainings/{training_id}")
async def update_training(
    training_id: str,
    training: TrainingUpdateRequest,
    service: TrainingService = Depends(get_training_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.update_training(training_id, training.model_dump(exclude_unset=True), current_user.id)


@router.delete("/api/trainings/{training_id}")
async def delete_training(
    training_id: str,
    service: TrainingService = Depends(get_training_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.delete_training(training_id, current_user.id)


# --- CALENDAR VIEWS ---

@router.get("/api/calendar/month")
async def get_month_view(
    year: int,
    month: int,
    selected: Optional[str] = None,
    service: TrainingService = Depends(get_training_service),
    current_user: UserORM = Depends(get_current_user)
):
    """42-day grid for the month, starting on a Monday."""
    require_trainer(current_user)
    return service.get_month_view(current_user.id, year, month, selected)


@router.get("/api/calendar/week")
async def get_week_view(
    date: str,
    service: TrainingService = Depends(get_training_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.get_week_view(current_user.id, date)


@router.get("/api/calendar/day")
async def get_day_view(
    date: str,
    service: TrainingService = Depends(get_training_service),
    current_user: UserORM = Depends(get_current_user)
):
    require_trainer(current_user)
    return service.get_day_view(current_user.id, date)
