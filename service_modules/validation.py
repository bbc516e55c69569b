"""
Validation helpers for registration, trainings and workout plans.

Each validator returns an ordered list of human-readable error messages.
An empty list means the input is valid.
"""
import re
from datetime import date
from typing import Iterable, List, Optional, Tuple

from service_modules.calendar_helper import MINUTES_PER_DAY, find_conflict, is_past_date, is_valid_time, time_to_minutes

SPECIAL_CHARACTERS = '!@#$%^&*(),.?":{}|<>'
PHONE_PATTERN = re.compile(r"^(\+48\s?)?(\d{3}\s?\d{3}\s?\d{3}|\d{9})$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

TRAINING_STATUSES = ("confirmed", "pending", "cancelled")
MIN_TRAINING_DURATION = 15
MIN_PLAN_DURATION = 15

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
MAX_EXPERIENCE_YEARS = 50


# --- PASSWORDS ---

def password_strength(password: Optional[str]) -> Tuple[int, str]:
    """Score a password 0-6 and map it to weak / medium / strong / very strong."""
    password = password or ""
    score = 0
    if len(password) >= 8:
        score += 1
    if len(password) >= 12:
        score += 1
    if re.search(r"[a-z]", password):
        score += 1
    if re.search(r"[A-Z]", password):
        score += 1
    if re.search(r"[0-9]", password):
        score += 1
    if re.search(r"[^A-Za-z0-9]", password):
        score += 1

    if score <= 2:
        label = "weak"
    elif score <= 4:
        label = "medium"
    elif score <= 5:
        label = "strong"
    else:
        label = "very strong"
    return score, label


def check_strong_password(password: Optional[str]) -> List[str]:
    password = password or ""
    errors = []
    if len(password) < 8:
        errors.append("Password must be at least 8 characters long")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain an uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain a lowercase letter")
    if not re.search(r"[0-9]", password):
        errors.append("Password must contain a digit")
    if not any(ch in SPECIAL_CHARACTERS for ch in password):
        errors.append("Password must contain a special character")
    return errors


# --- CONTACT DETAILS ---

def is_valid_phone(phone: Optional[str]) -> bool:
    """Phone is optional: empty values are accepted."""
    if not phone:
        return True
    return PHONE_PATTERN.match(phone) is not None


def is_valid_email(email: Optional[str]) -> bool:
    if not email:
        return False
    return EMAIL_PATTERN.match(email.strip()) is not None


def _check_name(value: Optional[str], label: str) -> Optional[str]:
    value = (value or "").strip()
    if not value:
        return f"{label} is required"
    if len(value) < NAME_MIN_LENGTH:
        return f"{label} must be at least {NAME_MIN_LENGTH} characters"
    if len(value) > NAME_MAX_LENGTH:
        return f"{label} must be at most {NAME_MAX_LENGTH} characters"
    return None


# --- REGISTRATION ---

def validate_registration(data: dict) -> List[str]:
    errors = []

    for field, label in (("first_name", "First name"), ("last_name", "Last name")):
        error = _check_name(data.get(field), label)
        if error:
            errors.append(error)

    email = (data.get("email") or "").strip()
    if not email:
        errors.append("Email is required")
    elif not is_valid_email(email):
        errors.append("Invalid email format")

    if not is_valid_phone(data.get("phone")):
        errors.append("Invalid phone number format")

    password = data.get("password") or ""
    if not password:
        errors.append("Password is required")
    else:
        errors.extend(check_strong_password(password))

    confirm = data.get("confirm_password") or ""
    if not confirm:
        errors.append("Password confirmation is required")
    elif password and confirm != password:
        errors.append("Passwords do not match")

    experience = data.get("experience")
    if experience is not None and not (0 <= experience <= MAX_EXPERIENCE_YEARS):
        errors.append(f"Experience must be between 0 and {MAX_EXPERIENCE_YEARS} years")

    if not data.get("accept_terms"):
        errors.append("You must accept the terms and conditions")

    return errors


def validate_password_reset(password: Optional[str], confirm_password: Optional[str]) -> List[str]:
    errors = []
    if not password:
        errors.append("Password is required")
    else:
        errors.extend(check_strong_password(password))
    if password and confirm_password != password:
        errors.append("Passwords do not match")
    return errors


# --- TRAININGS ---

def validate_training(
    data: dict,
    existing: Iterable[dict] = (),
    exclude_id: Optional[str] = None,
    today: Optional[date] = None
) -> List[str]:
    """
    Validate a training form against the trainer's existing bookings.
    A past date is always reported, whatever else is wrong with the form.
    """
    errors = []

    training_date = data.get("date")
    date_ok = False
    if not training_date:
        errors.append("Date is required")
    else:
        try:
            if is_past_date(training_date, today):
                errors.append("Cannot schedule a training in the past")
            date_ok = True
        except (ValueError, TypeError):
            errors.append("Invalid date format (expected YYYY-MM-DD)")

    start_time = data.get("start_time")
    if not start_time:
        errors.append("Start time is required")
    elif not is_valid_time(start_time):
        errors.append("Invalid start time format (expected HH:MM)")

    if not (data.get("client_name") or "").strip():
        errors.append("Client name is required")

    if not (data.get("location") or "").strip():
        errors.append("Location is required")

    duration = data.get("duration")
    if not duration or duration < MIN_TRAINING_DURATION:
        errors.append(f"Duration must be at least {MIN_TRAINING_DURATION} minutes")
    elif is_valid_time(start_time) and time_to_minutes(start_time) + duration > MINUTES_PER_DAY:
        errors.append("Training must end by midnight")

    status = data.get("status")
    if status and status not in TRAINING_STATUSES:
        errors.append(f"Status must be one of: {', '.join(TRAINING_STATUSES)}")

    if date_ok and is_valid_time(start_time) and duration:
        conflict = find_conflict(existing, training_date, start_time, duration, exclude_id)
        if conflict:
            errors.append(f"Time conflict with training: {conflict['client_name']} ({conflict['start_time']})")

    return errors


# --- WORKOUT PLANS ---

def validate_workout_plan(data: dict) -> List[str]:
    errors = []

    if not (data.get("name") or "").strip():
        errors.append("Plan name is required")

    if not (data.get("description") or "").strip():
        errors.append("Plan description is required")

    if not data.get("target_muscle_groups"):
        errors.append("Select at least one muscle group")

    if not data.get("exercises"):
        errors.append("Add at least one exercise")

    duration = data.get("duration")
    if duration is not None and duration < MIN_PLAN_DURATION:
        errors.append(f"Duration must be at least {MIN_PLAN_DURATION} minutes")

    return errors
