"""
Base service utilities and shared imports.
All services should import from here for common functionality.
"""
from fastapi import HTTPException
import uuid
import json
import logging
from datetime import date, datetime, timedelta

from database import get_db_session, Base, engine
from models_orm import (
    UserORM, PasswordResetTokenORM, ClientORM, TrainingORM,
    ExerciseORM, WorkoutPlanORM
)

# Re-export for convenience
__all__ = [
    'HTTPException', 'uuid', 'json', 'logging', 'date', 'datetime', 'timedelta',
    'get_db_session', 'Base', 'engine',
    'UserORM', 'PasswordResetTokenORM', 'ClientORM', 'TrainingORM',
    'ExerciseORM', 'WorkoutPlanORM',
    'validation_error', 'load_json_list'
]

logger = logging.getLogger("gymbucket")


def validation_error(message: str, errors: list) -> HTTPException:
    """400 response carrying the ordered list of validation messages."""
    return HTTPException(status_code=400, detail={"message": message, "errors": errors})


def load_json_list(value) -> list:
    return json.loads(value) if value else []
