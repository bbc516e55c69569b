"""
Workout Plan Service - handles plan authoring, duplication, client assignment
and the ordered exercise list inside a plan.
"""
from typing import Optional

from .base import (
    HTTPException, uuid, json, logging, date,
    get_db_session, WorkoutPlanORM, ClientORM, load_json_list, validation_error
)
from .exercise_service import exercise_service
from .validation import validate_workout_plan
from data import WORKOUT_PLAN_TEMPLATES

logger = logging.getLogger("gymbucket")

PLAN_CATEGORIES = ("strength", "cardio", "flexibility", "mixed")
PLAN_EXERCISE_DEFAULTS = {
    "sets": 3,
    "reps": "8-10",
    "weight": 0,
    "duration": 0,
    "rest_time": 60,
    "notes": ""
}


def renumber_exercises(exercises: list) -> list:
    """Orders are 1-based and contiguous after every edit."""
    for i, ex in enumerate(exercises):
        ex["order"] = i + 1
    return exercises


def move_exercise(exercises: list, index: int, direction: str) -> list:
    """Swap the exercise at ``index`` with its neighbour. Moving past either end is a no-op."""
    if direction not in ("up", "down"):
        raise ValueError(f"Invalid direction: {direction}")
    target = index - 1 if direction == "up" else index + 1
    if 0 <= index < len(exercises) and 0 <= target < len(exercises):
        exercises[index], exercises[target] = exercises[target], exercises[index]
    return renumber_exercises(exercises)


def plan_metadata(exercises: list, exercise_map: dict, target_muscle_groups: list) -> tuple:
    """
    Derive the plan's equipment (union over its exercises) and fill in the
    target muscle groups from the exercises when none were chosen.
    """
    equipment = []
    muscle_groups = []
    for plan_ex in exercises:
        ex = exercise_map.get(plan_ex["exercise_id"])
        if not ex:
            continue
        for item in ex["equipment"]:
            if item not in equipment:
                equipment.append(item)
        for group in ex["muscle_groups"]:
            if group not in muscle_groups:
                muscle_groups.append(group)
    return equipment, (target_muscle_groups or muscle_groups)


class WorkoutPlanService:
    """Service for managing workout plans."""

    def _plan_to_dict(self, plan: WorkoutPlanORM) -> dict:
        return {
            "id": plan.id,
            "name": plan.name,
            "description": plan.description or "",
            "category": plan.category,
            "difficulty": plan.difficulty,
            "duration": plan.duration,
            "target_muscle_groups": load_json_list(plan.target_muscle_groups_json),
            "exercises": load_json_list(plan.exercises_json),
            "created_date": plan.created_date,
            "last_modified": plan.last_modified,
            "is_public": bool(plan.is_public),
            "created_by": plan.created_by,
            "tags": load_json_list(plan.tags_json),
            "equipment": load_json_list(plan.equipment_json),
            "client_assignments": load_json_list(plan.client_assignments_json)
        }

    def _get_visible_plan(self, db, plan_id: str, trainer_id: str) -> WorkoutPlanORM:
        plan = db.query(WorkoutPlanORM).filter(WorkoutPlanORM.id == plan_id).first()
        if not plan or (plan.created_by != trainer_id and not plan.is_public):
            raise HTTPException(status_code=404, detail="Workout plan not found")
        return plan

    def _get_owned_plan(self, db, plan_id: str, trainer_id: str) -> WorkoutPlanORM:
        plan = self._get_visible_plan(db, plan_id, trainer_id)
        if plan.created_by != trainer_id:
            raise HTTPException(status_code=403, detail="Cannot edit this workout plan")
        return plan

    def _normalize_exercises(self, exercises: list, exercise_map: dict) -> list:
        normalized = []
        for ex in exercises:
            if ex.get("exercise_id") not in exercise_map:
                raise HTTPException(status_code=400, detail=f"Exercise not found: {ex.get('exercise_id')}")
            entry = dict(PLAN_EXERCISE_DEFAULTS)
            entry.update({k: v for k, v in ex.items() if v is not None and k != "exercise"})
            normalized.append(entry)
        return renumber_exercises(normalized)

    def _apply_exercises(self, plan: WorkoutPlanORM, exercises: list, exercise_map: dict):
        target_groups = load_json_list(plan.target_muscle_groups_json)
        equipment, target_groups = plan_metadata(exercises, exercise_map, target_groups)
        plan.exercises_json = json.dumps(exercises)
        plan.equipment_json = json.dumps(equipment)
        plan.target_muscle_groups_json = json.dumps(target_groups)
        plan.last_modified = date.today().isoformat()

    def get_plans(self, trainer_id: str, search: Optional[str] = None, category: Optional[str] = None,
                  difficulty: Optional[str] = None, muscle_group: Optional[str] = None,
                  equipment: Optional[str] = None, mine: bool = False) -> list:
        """List the trainer's own plans plus public ones, filtered."""
        db = get_db_session()
        try:
            query = db.query(WorkoutPlanORM)
            if mine:
                query = query.filter(WorkoutPlanORM.created_by == trainer_id)
            else:
                query = query.filter(
                    (WorkoutPlanORM.created_by == trainer_id) | (WorkoutPlanORM.is_public == True)  # noqa: E712
                )
            plans = [self._plan_to_dict(p) for p in query.order_by(WorkoutPlanORM.name).all()]
        finally:
            db.close()

        term = (search or "").lower()

        def matches(plan):
            if term and not (
                term in plan["name"].lower()
                or term in plan["description"].lower()
                or any(term in tag.lower() for tag in plan["tags"])
            ):
                return False
            if category and plan["category"] != category:
                return False
            if difficulty and plan["difficulty"] != difficulty:
                return False
            if muscle_group and muscle_group not in plan["target_muscle_groups"]:
                return False
            if equipment and equipment not in plan["equipment"]:
                return False
            return True

        return [p for p in plans if matches(p)]

    def get_templates(self) -> list:
        return [dict(t) for t in WORKOUT_PLAN_TEMPLATES]

    def get_plan(self, plan_id: str, trainer_id: str) -> dict:
        """Plan details with each entry enriched with its exercise."""
        db = get_db_session()
        try:
            plan = self._plan_to_dict(self._get_visible_plan(db, plan_id, trainer_id))
            exercise_map = exercise_service.get_exercise_map(db, trainer_id)
        finally:
            db.close()

        for plan_ex in plan["exercises"]:
            plan_ex["exercise"] = exercise_map.get(plan_ex["exercise_id"])
        return plan

    def create_plan(self, data: dict, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            exercise_map = exercise_service.get_exercise_map(db, trainer_id)
            exercises = self._normalize_exercises(data.get("exercises") or [], exercise_map)
            equipment, target_groups = plan_metadata(exercises, exercise_map, data.get("target_muscle_groups") or [])

            candidate = dict(data, exercises=exercises, target_muscle_groups=target_groups)
            errors = validate_workout_plan(candidate)
            if data.get("category") and data["category"] not in PLAN_CATEGORIES:
                errors.append(f"Category must be one of: {', '.join(PLAN_CATEGORIES)}")
            if errors:
                raise validation_error("Workout plan validation failed", errors)

            today = date.today().isoformat()
            plan = WorkoutPlanORM(
                id=str(uuid.uuid4()),
                name=data["name"].strip(),
                description=data["description"].strip(),
                category=data.get("category") or "strength",
                difficulty=data.get("difficulty") or "beginner",
                duration=data.get("duration") or 60,
                target_muscle_groups_json=json.dumps(target_groups),
                exercises_json=json.dumps(exercises),
                tags_json=json.dumps(data.get("tags") or []),
                equipment_json=json.dumps(equipment),
                client_assignments_json=json.dumps([]),
                is_public=bool(data.get("is_public")),
                created_by=trainer_id,
                created_date=today,
                last_modified=today
            )
            db.add(plan)
            db.commit()
            db.refresh(plan)
            logger.info(f"Workout plan '{plan.name}' created by trainer {trainer_id}")
            return self._plan_to_dict(plan)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating workout plan: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create workout plan: {str(e)}")
        finally:
            db.close()

    def update_plan(self, plan_id: str, updates: dict, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            plan = self._get_owned_plan(db, plan_id, trainer_id)
            exercise_map = exercise_service.get_exercise_map(db, trainer_id)

            merged = self._plan_to_dict(plan)
            merged.update({k: v for k, v in updates.items() if v is not None})
            exercises = self._normalize_exercises(merged["exercises"], exercise_map)
            equipment, target_groups = plan_metadata(exercises, exercise_map, merged["target_muscle_groups"])
            merged.update(exercises=exercises, target_muscle_groups=target_groups)

            errors = validate_workout_plan(merged)
            if merged["category"] not in PLAN_CATEGORIES:
                errors.append(f"Category must be one of: {', '.join(PLAN_CATEGORIES)}")
            if errors:
                raise validation_error("Workout plan validation failed", errors)

            plan.name = merged["name"].strip()
            plan.description = merged["description"].strip()
            plan.category = merged["category"]
            plan.difficulty = merged["difficulty"]
            plan.duration = merged["duration"]
            plan.target_muscle_groups_json = json.dumps(target_groups)
            plan.exercises_json = json.dumps(exercises)
            plan.tags_json = json.dumps(merged["tags"])
            plan.equipment_json = json.dumps(equipment)
            plan.is_public = bool(merged["is_public"])
            plan.last_modified = date.today().isoformat()

            db.commit()
            db.refresh(plan)
            return self._plan_to_dict(plan)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating workout plan {plan_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update workout plan: {str(e)}")
        finally:
            db.close()

    def delete_plan(self, plan_id: str, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            plan = self._get_owned_plan(db, plan_id, trainer_id)
            db.delete(plan)
            db.commit()
            logger.info(f"Workout plan {plan_id} deleted by trainer {trainer_id}")
            return {"status": "success", "message": "Workout plan deleted"}
        finally:
            db.close()

    def duplicate_plan(self, plan_id: str, trainer_id: str) -> dict:
        """Copy a plan into the caller's library: private and unassigned."""
        db = get_db_session()
        try:
            source = self._get_visible_plan(db, plan_id, trainer_id)
            today = date.today().isoformat()
            copy = WorkoutPlanORM(
                id=str(uuid.uuid4()),
                name=f"{source.name} (copy)",
                description=source.description,
                category=source.category,
                difficulty=source.difficulty,
                duration=source.duration,
                target_muscle_groups_json=source.target_muscle_groups_json,
                exercises_json=source.exercises_json,
                tags_json=source.tags_json,
                equipment_json=source.equipment_json,
                client_assignments_json=json.dumps([]),
                is_public=False,
                created_by=trainer_id,
                created_date=today,
                last_modified=today
            )
            db.add(copy)
            db.commit()
            db.refresh(copy)
            return self._plan_to_dict(copy)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error duplicating workout plan {plan_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to duplicate workout plan: {str(e)}")
        finally:
            db.close()

    def assign_plan(self, plan_id: str, client_ids: list, trainer_id: str) -> dict:
        """Replace the plan's client assignments with ``client_ids``."""
        db = get_db_session()
        try:
            plan = self._get_owned_plan(db, plan_id, trainer_id)

            client_ids = list(dict.fromkeys(client_ids))
            if client_ids:
                known = {
                    c.id for c in db.query(ClientORM).filter(
                        ClientORM.trainer_id == trainer_id,
                        ClientORM.id.in_(client_ids)
                    ).all()
                }
                unknown = [cid for cid in client_ids if cid not in known]
                if unknown:
                    raise HTTPException(status_code=400, detail=f"Unknown clients: {', '.join(unknown)}")

            plan.client_assignments_json = json.dumps(client_ids)
            plan.last_modified = date.today().isoformat()
            db.commit()
            db.refresh(plan)
            logger.info(f"Workout plan {plan_id} assigned to {len(client_ids)} clients")
            return self._plan_to_dict(plan)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error assigning workout plan {plan_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to assign workout plan: {str(e)}")
        finally:
            db.close()

    # Exercise list editing

    def add_exercise(self, plan_id: str, entry: dict, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            plan = self._get_owned_plan(db, plan_id, trainer_id)
            exercise_map = exercise_service.get_exercise_map(db, trainer_id)
            if entry.get("exercise_id") not in exercise_map:
                raise HTTPException(status_code=404, detail="Exercise not found")

            exercises = load_json_list(plan.exercises_json)
            new_entry = dict(PLAN_EXERCISE_DEFAULTS)
            new_entry.update({k: v for k, v in entry.items() if v is not None})
            new_entry["order"] = len(exercises) + 1
            exercises.append(new_entry)

            self._apply_exercises(plan, exercises, exercise_map)
            db.commit()
            db.refresh(plan)
            return self._plan_to_dict(plan)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error adding exercise to plan {plan_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to add exercise: {str(e)}")
        finally:
            db.close()

    def remove_exercise(self, plan_id: str, index: int, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            plan = self._get_owned_plan(db, plan_id, trainer_id)
            exercises = load_json_list(plan.exercises_json)
            if not 0 <= index < len(exercises):
                raise HTTPException(status_code=404, detail="Exercise index out of range")

            if len(exercises) == 1:
                raise HTTPException(status_code=400, detail="A workout plan needs at least one exercise")

            exercises.pop(index)
            renumber_exercises(exercises)

            self._apply_exercises(plan, exercises, exercise_service.get_exercise_map(db, trainer_id))
            db.commit()
            db.refresh(plan)
            return self._plan_to_dict(plan)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error removing exercise from plan {plan_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to remove exercise: {str(e)}")
        finally:
            db.close()

    def move_exercise(self, plan_id: str, index: int, direction: str, trainer_id: str) -> dict:
        db = get_db_session()
        try:
            plan = self._get_owned_plan(db, plan_id, trainer_id)
            exercises = load_json_list(plan.exercises_json)
            if not 0 <= index < len(exercises):
                raise HTTPException(status_code=404, detail="Exercise index out of range")
            try:
                move_exercise(exercises, index, direction)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

            plan.exercises_json = json.dumps(exercises)
            plan.last_modified = date.today().isoformat()
            db.commit()
            db.refresh(plan)
            return self._plan_to_dict(plan)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error moving exercise in plan {plan_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to move exercise: {str(e)}")
        finally:
            db.close()


# Singleton instance
workout_plan_service = WorkoutPlanService()

def get_workout_plan_service() -> WorkoutPlanService:
    """Dependency injection helper."""
    return workout_plan_service
