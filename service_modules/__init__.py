"""
Services package - organized service modules.
"""
from .base import *
from .auth_service import AuthService, auth_service, get_auth_service
from .training_service import TrainingService, training_service, get_training_service
from .exercise_service import ExerciseService, exercise_service, get_exercise_service
from .workout_plan_service import WorkoutPlanService, workout_plan_service, get_workout_plan_service
from .client_service import ClientService, client_service, get_client_service

__all__ = [
    'AuthService',
    'auth_service',
    'get_auth_service',
    'TrainingService',
    'training_service',
    'get_training_service',
    'ExerciseService',
    'exercise_service',
    'get_exercise_service',
    'WorkoutPlanService',
    'workout_plan_service',
    'get_workout_plan_service',
    'ClientService',
    'client_service',
    'get_client_service',
]
