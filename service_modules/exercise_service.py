"""
Exercise Service - handles the exercise library (global + personal).
"""
from typing import Optional

from .base import (
    HTTPException, uuid, json, logging,
    get_db_session, ExerciseORM, WorkoutPlanORM, load_json_list
)
from data import MUSCLE_GROUPS, EQUIPMENT_LIST

logger = logging.getLogger("gymbucket")

DIFFICULTIES = ("beginner", "intermediate", "advanced")


class ExerciseService:
    """Service for managing exercises."""

    def _exercise_to_dict(self, ex: ExerciseORM) -> dict:
        """Convert exercise ORM to dict with all fields."""
        return {
            "id": ex.id,
            "name": ex.name,
            "muscle_groups": load_json_list(ex.muscle_groups_json),
            "equipment": load_json_list(ex.equipment_json),
            "description": ex.description or "",
            "instructions": load_json_list(ex.instructions_json),
            "image_url": ex.image_url,
            "video_url": ex.video_url,
            "difficulty": ex.difficulty or "beginner",
            "owner_id": ex.owner_id
        }

    def _accessible_query(self, db, trainer_id: str):
        # Global (owner_id is None) AND Personal (owner_id == trainer_id)
        return db.query(ExerciseORM).filter(
            (ExerciseORM.owner_id == None) | (ExerciseORM.owner_id == trainer_id)  # noqa: E711
        )

    def get_exercise_map(self, db, trainer_id: str) -> dict:
        """id -> exercise dict for everything the trainer can use."""
        return {ex.id: self._exercise_to_dict(ex) for ex in self._accessible_query(db, trainer_id).all()}

    def get_exercises(self, trainer_id: str, search: Optional[str] = None,
                      muscle_group: Optional[str] = None, equipment: Optional[str] = None,
                      difficulty: Optional[str] = None) -> list:
        """Get all exercises accessible to a trainer (global + personal)."""
        db = get_db_session()
        try:
            exercises = [self._exercise_to_dict(ex) for ex in self._accessible_query(db, trainer_id).order_by(ExerciseORM.name).all()]
        finally:
            db.close()

        if search:
            query = search.lower()
            exercises = [
                ex for ex in exercises
                if query in ex["name"].lower() or query in ex["description"].lower()
            ]
        if muscle_group:
            exercises = [ex for ex in exercises if muscle_group in ex["muscle_groups"]]
        if equipment:
            exercises = [ex for ex in exercises if equipment in ex["equipment"]]
        if difficulty:
            exercises = [ex for ex in exercises if ex["difficulty"] == difficulty]
        return exercises

    def get_filter_options(self) -> dict:
        return {
            "muscle_groups": list(MUSCLE_GROUPS),
            "equipment": list(EQUIPMENT_LIST),
            "difficulties": list(DIFFICULTIES)
        }

    def get_exercise(self, exercise_id: str, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            ex = self._accessible_query(db, trainer_id).filter(ExerciseORM.id == exercise_id).first()
            if not ex:
                raise HTTPException(status_code=404, detail="Exercise not found")
            return self._exercise_to_dict(ex)
        finally:
            db.close()

    def create_exercise(self, exercise: dict, trainer_id: str) -> dict:
        """Create a new personal exercise."""
        name = (exercise.get("name") or "").strip()
        if not name:
            raise HTTPException(status_code=400, detail="Exercise name is required")
        difficulty = exercise.get("difficulty") or "beginner"
        if difficulty not in DIFFICULTIES:
            raise HTTPException(status_code=400, detail=f"Invalid difficulty: {difficulty}")

        db = get_db_session()
        try:
            db_ex = ExerciseORM(
                id=str(uuid.uuid4()),
                name=name,
                muscle_groups_json=json.dumps(exercise.get("muscle_groups") or []),
                equipment_json=json.dumps(exercise.get("equipment") or []),
                description=exercise.get("description") or "",
                instructions_json=json.dumps(exercise.get("instructions") or []),
                image_url=exercise.get("image_url"),
                video_url=exercise.get("video_url"),
                difficulty=difficulty,
                owner_id=trainer_id
            )
            db.add(db_ex)
            db.commit()
            db.refresh(db_ex)
            logger.info(f"Exercise '{name}' created by trainer {trainer_id}")
            return self._exercise_to_dict(db_ex)
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating exercise: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create exercise: {str(e)}")
        finally:
            db.close()

    def delete_exercise(self, exercise_id: str, trainer_id: str) -> dict:
        """Delete a personal exercise."""
        db = get_db_session()
        try:
            ex = db.query(ExerciseORM).filter(ExerciseORM.id == exercise_id).first()
            if not ex:
                raise HTTPException(status_code=404, detail="Exercise not found")

            if ex.owner_id != trainer_id:
                raise HTTPException(status_code=403, detail="Can only delete your own exercises")

            # Substring match first, then check the parsed entries
            candidates = db.query(WorkoutPlanORM).filter(WorkoutPlanORM.exercises_json.contains(exercise_id)).all()
            in_use = [
                p.name for p in candidates
                if any(entry.get("exercise_id") == exercise_id for entry in load_json_list(p.exercises_json))
            ]
            if in_use:
                raise HTTPException(
                    status_code=409,
                    detail=f"Exercise is used by workout plans: {', '.join(in_use)}"
                )

            db.delete(ex)
            db.commit()
            logger.info(f"Exercise {exercise_id} deleted by trainer {trainer_id}")
            return {"status": "success", "message": "Exercise deleted"}
        finally:
            db.close()


# Singleton instance
exercise_service = ExerciseService()

def get_exercise_service() -> ExerciseService:
    """Dependency injection helper."""
    return exercise_service
