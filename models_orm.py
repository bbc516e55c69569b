from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from database import Base
from datetime import datetime

# --- CORE MODELS ---

class UserORM(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True)
    hashed_password = Column(String)
    first_name = Column(String)
    last_name = Column(String)
    role = Column(String, index=True, default="trainer")  # trainer, admin, client
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    last_login = Column(String, nullable=True)

    # Profile
    avatar = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    specializations_json = Column(String, nullable=True)  # JSON array of strings
    certifications_json = Column(String, nullable=True)  # JSON array of strings
    experience = Column(Integer, nullable=True)  # Years
    accept_newsletter = Column(Boolean, default=False)
    terms_agreed_at = Column(String, nullable=True)  # ISO datetime when user agreed to Terms

    # Email verification
    is_email_verified = Column(Boolean, default=False)
    email_verification_token = Column(String, nullable=True, index=True)


class PasswordResetTokenORM(Base):
    """One-shot password reset tokens. Only the bcrypt hash is stored."""
    __tablename__ = "password_reset_tokens"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), index=True)
    token_hash = Column(String)
    expires_at = Column(String)  # ISO datetime
    used_at = Column(String, nullable=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())


# --- CLIENT ROSTER ---

class ClientORM(Base):
    __tablename__ = "clients"

    id = Column(String, primary_key=True, index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)
    name = Column(String, index=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())


# --- CALENDAR ---

class TrainingORM(Base):
    """A booked training session on the trainer's calendar"""
    __tablename__ = "trainings"

    id = Column(String, primary_key=True, index=True)
    trainer_id = Column(String, ForeignKey("users.id"), index=True)

    date = Column(String, index=True)  # ISO format YYYY-MM-DD
    start_time = Column(String)  # HH:MM format (24-hour)
    duration = Column(Integer, default=60)  # Duration in minutes

    client_name = Column(String, index=True)
    location = Column(String)
    notes = Column(String, nullable=True)
    status = Column(String, default="confirmed", index=True)  # confirmed, pending, cancelled

    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String, default=lambda: datetime.utcnow().isoformat())


# --- EXERCISE & WORKOUT PLAN LIBRARY (Global + Personal) ---

class ExerciseORM(Base):
    __tablename__ = "exercises"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, index=True)
    muscle_groups_json = Column(String, default="[]")
    equipment_json = Column(String, default="[]")
    description = Column(String, nullable=True)
    instructions_json = Column(String, default="[]")
    image_url = Column(String, nullable=True)
    video_url = Column(String, nullable=True)
    difficulty = Column(String, default="beginner")  # beginner, intermediate, advanced
    # If owner_id is NULL, it's a global exercise. If set, it belongs to that trainer.
    owner_id = Column(String, ForeignKey("users.id"), index=True, nullable=True)


class WorkoutPlanORM(Base):
    __tablename__ = "workout_plans"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, index=True)
    description = Column(String)
    category = Column(String, default="strength")  # strength, cardio, flexibility, mixed
    difficulty = Column(String, default="beginner")
    duration = Column(Integer, default=60)  # Estimated minutes
    target_muscle_groups_json = Column(String, default="[]")
    exercises_json = Column(String, default="[]")  # Ordered WorkoutPlanExercise dicts
    tags_json = Column(String, default="[]")
    equipment_json = Column(String, default="[]")
    client_assignments_json = Column(String, default="[]")  # Client IDs
    is_public = Column(Boolean, default=False)
    created_by = Column(String, ForeignKey("users.id"), index=True)
    created_date = Column(String)  # YYYY-MM-DD
    last_modified = Column(String)  # YYYY-MM-DD
