"""
Routes package - organized API routes.

This package provides modular route definitions.
Import the combined router for use in main.py.
"""
from fastapi import APIRouter

from .auth_routes import router as auth_router
from .training_routes import router as training_router
from .workout_plan_routes import router as workout_plan_router
from .exercise_routes import router as exercise_router
from .client_routes import router as client_router

# Combined router that includes all sub-routers
combined_router = APIRouter()
combined_router.include_router(auth_router, tags=["auth"])
combined_router.include_router(training_router, tags=["trainings"])
combined_router.include_router(workout_plan_router, tags=["workout-plans"])
combined_router.include_router(exercise_router, tags=["exercises"])
combined_router.include_router(client_router, tags=["clients"])

__all__ = ['combined_router', 'auth_router', 'training_router', 'workout_plan_router', 'exercise_router', 'client_router']
