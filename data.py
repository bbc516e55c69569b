# --- MOCK DATABASE ---
# Demo content loaded by seed_demo_data.py when SEED_DEMO_DATA=1.

DEMO_TRAINER = {
    "email": "trainer@gymbucket.dev",
    "password": "Trainer123!",
    "first_name": "Kasia",
    "last_name": "Trenerska",
    "phone": "+48 600 100 200",
    "specializations": ["Strength training", "Functional training"],
    "experience": 6
}

MUSCLE_GROUPS = [
    "Chest", "Back", "Shoulders", "Biceps", "Triceps",
    "Legs", "Glutes", "Abs", "Core", "Calves", "Forearms", "Full body"
]

EQUIPMENT_LIST = [
    "Barbell", "Dumbbells", "Kettlebell", "Machine", "Resistance band",
    "Bodyweight", "TRX", "Treadmill", "Bike", "Elliptical", "Bench"
]

CLIENTS = [
    {"id": "client1", "name": "Anna Kowalska", "email": "anna@example.com", "phone": "600 111 222"},
    {"id": "client2", "name": "Michał Nowak", "email": "michal@example.com", "phone": "600 333 444"},
    {"id": "client3", "name": "Ewa Wiśniewska", "email": "ewa@example.com", "phone": None}
]

# day_offset is relative to the seeding day so the calendar always has upcoming sessions
TRAININGS = [
    {"day_offset": 0, "start_time": "09:00", "duration": 60, "client_name": "Anna Kowalska",
     "location": "Gym A", "notes": "Strength - legs", "status": "confirmed"},
    {"day_offset": 0, "start_time": "11:00", "duration": 45, "client_name": "Michał Nowak",
     "location": "Gym B", "notes": "Cardio + stretching", "status": "confirmed"},
    {"day_offset": 1, "start_time": "14:00", "duration": 30, "client_name": "Ewa Wiśniewska",
     "location": "Fitness room", "notes": "Nutrition consultation", "status": "pending"},
    {"day_offset": 3, "start_time": "16:00", "duration": 90, "client_name": "Tomasz Zieliński",
     "location": "Gym A", "notes": "Functional training", "status": "confirmed"}
]

EXERCISE_LIBRARY = [
    {
        "id": "ex1",
        "name": "Flat Barbell Bench Press",
        "muscle_groups": ["Chest", "Triceps", "Shoulders"],
        "equipment": ["Barbell", "Bench"],
        "description": "Basic chest exercise",
        "instructions": [
            "Lie on the bench with your feet on the floor",
            "Grip the bar slightly wider than shoulder width",
            "Lower the bar under control to your chest",
            "Press the bar up without locking your elbows"
        ],
        "difficulty": "intermediate"
    },
    {
        "id": "ex2",
        "name": "Incline Dumbbell Press",
        "muscle_groups": ["Chest", "Shoulders"],
        "equipment": ["Dumbbells", "Bench"],
        "description": "Targets the upper chest",
        "instructions": [
            "Set the bench to 30-45 degrees",
            "Hold the dumbbells with a neutral grip",
            "Lower them under control to the sides of your chest",
            "Press up, bringing the dumbbells together over your chest"
        ],
        "difficulty": "beginner"
    },
    {
        "id": "ex3",
        "name": "Burpees",
        "muscle_groups": ["Full body", "Core", "Legs"],
        "equipment": ["Bodyweight"],
        "description": "Compound cardio and strength movement",
        "instructions": [
            "Stand tall",
            "Squat down and place your hands on the floor",
            "Jump your feet back into a plank",
            "Do a push-up (optional)",
            "Jump your feet back to the squat",
            "Jump up with your arms overhead"
        ],
        "difficulty": "advanced"
    }
]

WORKOUT_PLANS = [
    {
        "id": "plan1",
        "name": "Push Day - Upper Body",
        "description": "Pushing session focused on chest, shoulders and triceps",
        "category": "strength",
        "difficulty": "intermediate",
        "duration": 75,
        "target_muscle_groups": ["Chest", "Shoulders", "Triceps"],
        "exercises": [
            {"exercise_id": "ex1", "sets": 4, "reps": "8-10", "weight": 80, "duration": 0,
             "rest_time": 120, "notes": "Controlled tempo", "order": 1},
            {"exercise_id": "ex2", "sets": 3, "reps": "10-12", "weight": 25, "duration": 0,
             "rest_time": 90, "notes": "", "order": 2}
        ],
        "is_public": True,
        "tags": ["strength", "upper", "push"],
        "client_assignments": ["client1", "client2"]
    },
    {
        "id": "plan2",
        "name": "HIIT Cardio Burner",
        "description": "High intensity interval session for fat loss",
        "category": "cardio",
        "difficulty": "advanced",
        "duration": 30,
        "target_muscle_groups": ["Full body"],
        "exercises": [
            {"exercise_id": "ex3", "sets": 5, "reps": "30s", "weight": 0, "duration": 30,
             "rest_time": 30, "notes": "Max pace", "order": 1}
        ],
        "is_public": False,
        "tags": ["hiit", "cardio", "fat loss"],
        "client_assignments": []
    }
]

# System templates, read-only
WORKOUT_PLAN_TEMPLATES = [
    {
        "id": "tpl1",
        "name": "Full Body Workout for Beginners",
        "description": "Full body session, three times a week",
        "category": "strength",
        "exercises": [
            {"sets": 3, "reps": "8-12", "rest_time": 90, "order": 1},
            {"sets": 3, "reps": "8-12", "rest_time": 90, "order": 2},
            {"sets": 3, "reps": "8-12", "rest_time": 90, "order": 3}
        ],
        "is_system": True
    }
]
