from pydantic import BaseModel, Field
from typing import List, Optional

# --- TRAININGS ---
# Optional so missing fields come back in the validation error list
class TrainingRequest(BaseModel):
    date: Optional[str] = None  # YYYY-MM-DD
    start_time: Optional[str] = None  # HH:MM
    duration: Optional[int] = 60  # minutes
    client_name: Optional[str] = ""
    location: Optional[str] = ""
    notes: Optional[str] = ""
    status: Optional[str] = "confirmed"

class TrainingUpdateRequest(BaseModel):
    date: Optional[str] = None
    start_time: Optional[str] = None
    duration: Optional[int] = None
    client_name: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None

class ConflictCheckRequest(BaseModel):
    date: str
    start_time: str
    duration: int
    exclude_id: Optional[str] = None

# --- EXERCISES ---
class ExerciseRequest(BaseModel):
    name: str
    muscle_groups: List[str] = []
    equipment: List[str] = []
    description: Optional[str] = ""
    instructions: List[str] = []
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    difficulty: str = "beginner"

# --- WORKOUT PLANS ---
class WorkoutPlanExercise(BaseModel):
    exercise_id: str
    sets: int = 3
    reps: str = "8-10"  # e.g. "8-10", "12", "max", "30s"
    weight: Optional[float] = 0
    duration: Optional[int] = 0  # seconds, for cardio
    rest_time: int = 60  # seconds
    notes: Optional[str] = ""
    order: int = 0

class WorkoutPlanRequest(BaseModel):
    name: Optional[str] = ""
    description: Optional[str] = ""
    category: str = "strength"
    difficulty: str = "beginner"
    duration: Optional[int] = 60
    target_muscle_groups: List[str] = []
    exercises: List[WorkoutPlanExercise] = []
    is_public: bool = False
    tags: List[str] = []
    equipment: List[str] = []

class AssignPlanRequest(BaseModel):
    client_ids: List[str] = []

# --- CLIENTS ---
class ClientRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None

# --- AUTH ---
class RegisterRequest(BaseModel):
    email: Optional[str] = ""
    password: Optional[str] = ""
    confirm_password: Optional[str] = ""
    first_name: Optional[str] = ""
    last_name: Optional[str] = ""
    phone: Optional[str] = None
    specializations: List[str] = []
    experience: Optional[int] = None
    certification: Optional[str] = None
    accept_terms: bool = False
    accept_newsletter: bool = False

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    remember_me: bool = False

class RefreshTokenRequest(BaseModel):
    refresh_token: str

class ForgotPasswordRequest(BaseModel):
    email: str

class ResetPasswordRequest(BaseModel):
    token: str
    password: str
    confirm_password: str

class EmailVerificationRequest(BaseModel):
    token: str

class ResendVerificationRequest(BaseModel):
    email: str
