import json
import logging
import uuid
from datetime import date, datetime, timedelta

from database import get_db_session, init_db
from models_orm import UserORM, ClientORM, TrainingORM, ExerciseORM, WorkoutPlanORM
from auth import get_password_hash
from data import DEMO_TRAINER, CLIENTS, TRAININGS, EXERCISE_LIBRARY, WORKOUT_PLANS

logger = logging.getLogger("gymbucket")


def seed_exercises(db):
    """Global exercise library (owner_id = NULL)."""
    for ex in EXERCISE_LIBRARY:
        if db.query(ExerciseORM).filter(ExerciseORM.id == ex["id"]).first():
            continue
        db.add(ExerciseORM(
            id=ex["id"],
            name=ex["name"],
            muscle_groups_json=json.dumps(ex["muscle_groups"]),
            equipment_json=json.dumps(ex["equipment"]),
            description=ex["description"],
            instructions_json=json.dumps(ex["instructions"]),
            difficulty=ex["difficulty"],
            owner_id=None
        ))
    db.commit()


def seed_demo_data(today=None):
    """Create the demo trainer with clients, trainings and plans. Does nothing if the trainer exists."""
    today = today or date.today()
    init_db()
    db = get_db_session()
    try:
        seed_exercises(db)

        existing = db.query(UserORM).filter(UserORM.email == DEMO_TRAINER["email"]).first()
        if existing:
            logger.info(f"Demo trainer {DEMO_TRAINER['email']} already exists, skipping seed")
            return existing.id

        now = datetime.utcnow().isoformat()
        trainer = UserORM(
            id=str(uuid.uuid4()),
            email=DEMO_TRAINER["email"],
            hashed_password=get_password_hash(DEMO_TRAINER["password"]),
            first_name=DEMO_TRAINER["first_name"],
            last_name=DEMO_TRAINER["last_name"],
            role="trainer",
            is_active=True,
            phone=DEMO_TRAINER["phone"],
            specializations_json=json.dumps(DEMO_TRAINER["specializations"]),
            certifications_json=json.dumps([]),
            experience=DEMO_TRAINER["experience"],
            terms_agreed_at=now,
            is_email_verified=True,
            created_at=now
        )
        db.add(trainer)

        # Client ids are namespaced by trainer so that reseeding another trainer never collides
        client_ids = {}
        for c in CLIENTS:
            client_ids[c["id"]] = f"{trainer.id}-{c['id']}"
            db.add(ClientORM(
                id=client_ids[c["id"]],
                trainer_id=trainer.id,
                name=c["name"],
                email=c["email"],
                phone=c["phone"]
            ))

        for t in TRAININGS:
            db.add(TrainingORM(
                id=str(uuid.uuid4()),
                trainer_id=trainer.id,
                date=(today + timedelta(days=t["day_offset"])).isoformat(),
                start_time=t["start_time"],
                duration=t["duration"],
                client_name=t["client_name"],
                location=t["location"],
                notes=t["notes"],
                status=t["status"],
                created_at=now,
                updated_at=now
            ))

        plan_exercises = {ex["id"]: ex for ex in EXERCISE_LIBRARY}
        for p in WORKOUT_PLANS:
            equipment = []
            for entry in p["exercises"]:
                for item in plan_exercises[entry["exercise_id"]]["equipment"]:
                    if item not in equipment:
                        equipment.append(item)
            db.add(WorkoutPlanORM(
                id=str(uuid.uuid4()),
                name=p["name"],
                description=p["description"],
                category=p["category"],
                difficulty=p["difficulty"],
                duration=p["duration"],
                target_muscle_groups_json=json.dumps(p["target_muscle_groups"]),
                exercises_json=json.dumps(p["exercises"]),
                tags_json=json.dumps(p["tags"]),
                equipment_json=json.dumps(equipment),
                client_assignments_json=json.dumps([client_ids[cid] for cid in p["client_assignments"]]),
                is_public=p["is_public"],
                created_by=trainer.id,
                created_date=today.isoformat(),
                last_modified=today.isoformat()
            ))

        db.commit()
        logger.info(f"Seeded demo trainer {DEMO_TRAINER['email']} / {DEMO_TRAINER['password']}")
        return trainer.id
    except Exception as e:
        db.rollback()
        logger.error(f"Demo seed failed: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed_demo_data()
