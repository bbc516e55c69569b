import pytest

from conftest import register_and_login
from database import get_db_session
from seed_demo_data import seed_exercises


@pytest.fixture
def library():
    """Global exercises ex1 (bench press), ex2 (incline press), ex3 (burpees)."""
    db = get_db_session()
    try:
        seed_exercises(db)
    finally:
        db.close()


def plan_payload(**overrides):
    payload = {
        "name": "Push Day",
        "description": "Chest, shoulders and triceps",
        "category": "strength",
        "difficulty": "intermediate",
        "duration": 60,
        "target_muscle_groups": [],
        "exercises": [
            {"exercise_id": "ex1", "sets": 4, "reps": "8-10", "weight": 80, "rest_time": 120},
            {"exercise_id": "ex2", "sets": 3, "reps": "10-12"}
        ],
        "is_public": False,
        "tags": ["push", "upper"]
    }
    payload.update(overrides)
    return payload


def create_plan(client, headers, **overrides):
    res = client.post("/api/workout-plans", json=plan_payload(**overrides), headers=headers)
    assert res.status_code == 200, res.text
    return res.json()


# --- EXERCISES ---

def test_exercise_library(client, auth_headers, library):
    res = client.get("/api/exercises", headers=auth_headers)
    assert res.status_code == 200
    assert {ex["id"] for ex in res.json()} == {"ex1", "ex2", "ex3"}

    by_group = client.get("/api/exercises", params={"muscle_group": "Core"}, headers=auth_headers).json()
    assert [ex["id"] for ex in by_group] == ["ex3"]

    by_equipment = client.get("/api/exercises", params={"equipment": "Bench"}, headers=auth_headers).json()
    assert {ex["id"] for ex in by_equipment} == {"ex1", "ex2"}

    by_search = client.get("/api/exercises", params={"search": "burp"}, headers=auth_headers).json()
    assert [ex["name"] for ex in by_search] == ["Burpees"]

    one = client.get("/api/exercises/ex1", headers=auth_headers).json()
    assert one["equipment"] == ["Barbell", "Bench"]
    assert len(one["instructions"]) == 4


def test_personal_exercise_is_private(client, auth_headers):
    res = client.post(
        "/api/exercises",
        json={"name": "Goblet Squat", "muscle_groups": ["Legs"], "equipment": ["Kettlebell"]},
        headers=auth_headers
    )
    assert res.status_code == 200
    exercise = res.json()
    assert exercise["difficulty"] == "beginner"

    other = register_and_login(client)
    assert client.get(f"/api/exercises/{exercise['id']}", headers=other["headers"]).status_code == 404
    assert client.get(f"/api/exercises/{exercise['id']}", headers=auth_headers).status_code == 200


def test_create_exercise_rejects_bad_difficulty(client, auth_headers):
    res = client.post("/api/exercises", json={"name": "Plank", "difficulty": "extreme"}, headers=auth_headers)
    assert res.status_code == 400


# --- PLANS ---

def test_create_plan_derives_metadata(client, auth_headers, library):
    plan = create_plan(client, auth_headers)

    assert plan["equipment"] == ["Barbell", "Bench", "Dumbbells"]
    # Left empty, so filled from the exercises
    assert plan["target_muscle_groups"] == ["Chest", "Triceps", "Shoulders"]
    assert [ex["order"] for ex in plan["exercises"]] == [1, 2]
    assert plan["exercises"][1]["rest_time"] == 60
    assert plan["created_date"] == plan["last_modified"]
    assert plan["client_assignments"] == []


def test_explicit_target_groups_are_kept(client, auth_headers, library):
    plan = create_plan(client, auth_headers, target_muscle_groups=["Chest"])
    assert plan["target_muscle_groups"] == ["Chest"]


def test_create_plan_validation(client, auth_headers):
    res = client.post(
        "/api/workout-plans",
        json={"name": "", "description": "", "duration": 10},
        headers=auth_headers
    )
    assert res.status_code == 400
    assert res.json()["detail"]["errors"] == [
        "Plan name is required",
        "Plan description is required",
        "Select at least one muscle group",
        "Add at least one exercise",
        "Duration must be at least 15 minutes",
    ]


def test_create_plan_unknown_exercise(client, auth_headers, library):
    res = client.post(
        "/api/workout-plans",
        json=plan_payload(exercises=[{"exercise_id": "nope"}]),
        headers=auth_headers
    )
    assert res.status_code == 400


def test_plan_details_enriched(client, auth_headers, library):
    plan = create_plan(client, auth_headers)
    res = client.get(f"/api/workout-plans/{plan['id']}", headers=auth_headers)
    assert res.status_code == 200
    exercises = res.json()["exercises"]
    assert exercises[0]["exercise"]["name"] == "Flat Barbell Bench Press"
    assert exercises[1]["exercise"]["id"] == "ex2"


def test_list_filters(client, auth_headers, library):
    create_plan(client, auth_headers)
    create_plan(
        client, auth_headers,
        name="HIIT Burner", description="Intervals", category="cardio", difficulty="advanced",
        exercises=[{"exercise_id": "ex3", "sets": 5, "reps": "30s"}], tags=["hiit", "fat loss"]
    )

    def names(**params):
        res = client.get("/api/workout-plans", params=params, headers=auth_headers)
        assert res.status_code == 200
        return [p["name"] for p in res.json()]

    assert names() == ["HIIT Burner", "Push Day"]
    assert names(search="FAT") == ["HIIT Burner"]
    assert names(search="shoulders") == ["Push Day"]
    assert names(category="cardio") == ["HIIT Burner"]
    assert names(difficulty="intermediate") == ["Push Day"]
    assert names(muscle_group="Core") == ["HIIT Burner"]
    assert names(equipment="Dumbbells") == ["Push Day"]


def test_public_plans_visible_but_read_only(client, auth_headers, library):
    public = create_plan(client, auth_headers, is_public=True)
    private = create_plan(client, auth_headers, name="Secret")
    other = register_and_login(client)

    listed = client.get("/api/workout-plans", headers=other["headers"]).json()
    assert [p["id"] for p in listed] == [public["id"]]
    assert client.get("/api/workout-plans", params={"mine": True}, headers=other["headers"]).json() == []

    assert client.get(f"/api/workout-plans/{private['id']}", headers=other["headers"]).status_code == 404
    res = client.put(f"/api/workout-plans/{public['id']}", json={"name": "Mine now"}, headers=other["headers"])
    assert res.status_code == 403
    assert client.delete(f"/api/workout-plans/{public['id']}", headers=other["headers"]).status_code == 403


def test_update_plan(client, auth_headers, library):
    plan = create_plan(client, auth_headers)
    res = client.put(
        f"/api/workout-plans/{plan['id']}",
        json={"name": "Push Day v2", "exercises": [{"exercise_id": "ex3"}]},
        headers=auth_headers
    )
    assert res.status_code == 200, res.text
    updated = res.json()
    assert updated["name"] == "Push Day v2"
    assert updated["description"] == plan["description"]
    assert updated["equipment"] == ["Bodyweight"]
    assert updated["exercises"][0]["order"] == 1


def test_update_plan_validation(client, auth_headers, library):
    plan = create_plan(client, auth_headers)
    res = client.put(f"/api/workout-plans/{plan['id']}", json={"duration": 5}, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["detail"]["errors"] == ["Duration must be at least 15 minutes"]


def test_delete_plan(client, auth_headers, library):
    plan = create_plan(client, auth_headers)
    assert client.delete(f"/api/workout-plans/{plan['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/workout-plans/{plan['id']}", headers=auth_headers).status_code == 404


def test_duplicate_plan(client, auth_headers, library):
    plan = create_plan(client, auth_headers, is_public=True)
    roster = client.post("/api/clients", json={"name": "Anna Kowalska"}, headers=auth_headers).json()
    client.post(f"/api/workout-plans/{plan['id']}/assign", json={"client_ids": [roster["id"]]}, headers=auth_headers)

    other = register_and_login(client)
    res = client.post(f"/api/workout-plans/{plan['id']}/duplicate", headers=other["headers"])
    assert res.status_code == 200
    copy = res.json()
    assert copy["id"] != plan["id"]
    assert copy["name"] == "Push Day (copy)"
    assert copy["created_by"] == other["user"]["id"]
    assert copy["is_public"] is False
    assert copy["client_assignments"] == []
    assert copy["exercises"] == plan["exercises"]


def test_assign_plan(client, auth_headers, library):
    plan = create_plan(client, auth_headers)
    anna = client.post("/api/clients", json={"name": "Anna Kowalska"}, headers=auth_headers).json()
    ewa = client.post("/api/clients", json={"name": "Ewa Wiśniewska"}, headers=auth_headers).json()

    res = client.post(
        f"/api/workout-plans/{plan['id']}/assign",
        json={"client_ids": [anna["id"], ewa["id"]]},
        headers=auth_headers
    )
    assert res.status_code == 200
    assert res.json()["client_assignments"] == [anna["id"], ewa["id"]]

    # Assignment replaces the previous selection
    res = client.post(f"/api/workout-plans/{plan['id']}/assign", json={"client_ids": [ewa["id"]]}, headers=auth_headers)
    assert res.json()["client_assignments"] == [ewa["id"]]


def test_assign_unknown_client(client, auth_headers, library):
    plan = create_plan(client, auth_headers)
    res = client.post(f"/api/workout-plans/{plan['id']}/assign", json={"client_ids": ["ghost"]}, headers=auth_headers)
    assert res.status_code == 400


def test_templates(client, auth_headers):
    res = client.get("/api/workout-plans/templates", headers=auth_headers)
    assert res.status_code == 200
    templates = res.json()
    assert templates[0]["is_system"] is True
    assert [ex["order"] for ex in templates[0]["exercises"]] == [1, 2, 3]


# --- EXERCISE LIST EDITING ---

def test_add_exercise_appends(client, auth_headers, library):
    plan = create_plan(client, auth_headers)
    res = client.post(
        f"/api/workout-plans/{plan['id']}/exercises",
        json={"exercise_id": "ex3", "sets": 5, "reps": "30s", "duration": 30},
        headers=auth_headers
    )
    assert res.status_code == 200
    updated = res.json()
    assert [ex["exercise_id"] for ex in updated["exercises"]] == ["ex1", "ex2", "ex3"]
    assert updated["exercises"][-1]["order"] == 3
    assert "Bodyweight" in updated["equipment"]


def test_add_unknown_exercise_rejected(client, auth_headers, library):
    plan = create_plan(client, auth_headers)
    res = client.post(f"/api/workout-plans/{plan['id']}/exercises", json={"exercise_id": "nope"}, headers=auth_headers)
    assert res.status_code == 404


def test_remove_exercise_renumbers(client, auth_headers, library):
    plan = create_plan(client, auth_headers)
    client.post(f"/api/workout-plans/{plan['id']}/exercises", json={"exercise_id": "ex3"}, headers=auth_headers)

    res = client.delete(f"/api/workout-plans/{plan['id']}/exercises/0", headers=auth_headers)
    assert res.status_code == 200
    exercises = res.json()["exercises"]
    assert [ex["exercise_id"] for ex in exercises] == ["ex2", "ex3"]
    assert [ex["order"] for ex in exercises] == [1, 2]
    assert res.json()["equipment"] == ["Dumbbells", "Bench", "Bodyweight"]

    assert client.delete(f"/api/workout-plans/{plan['id']}/exercises/5", headers=auth_headers).status_code == 404


def test_move_exercise(client, auth_headers, library):
    plan = create_plan(client, auth_headers)
    url = f"/api/workout-plans/{plan['id']}/exercises"

    res = client.post(f"{url}/1/move", params={"direction": "up"}, headers=auth_headers)
    assert res.status_code == 200
    exercises = res.json()["exercises"]
    assert [ex["exercise_id"] for ex in exercises] == ["ex2", "ex1"]
    assert [ex["order"] for ex in exercises] == [1, 2]

    # Already at the top: nothing changes
    res = client.post(f"{url}/0/move", params={"direction": "up"}, headers=auth_headers)
    assert [ex["exercise_id"] for ex in res.json()["exercises"]] == ["ex2", "ex1"]

    res = client.post(f"{url}/0/move", params={"direction": "down"}, headers=auth_headers)
    assert [ex["exercise_id"] for ex in res.json()["exercises"]] == ["ex1", "ex2"]

    assert client.post(f"{url}/0/move", params={"direction": "sideways"}, headers=auth_headers).status_code == 400


def test_last_exercise_cannot_be_removed(client, auth_headers, library):
    plan = create_plan(client, auth_headers, exercises=[{"exercise_id": "ex1"}])

    res = client.delete(f"/api/workout-plans/{plan['id']}/exercises/0", headers=auth_headers)
    assert res.status_code == 400
    assert [ex["exercise_id"] for ex in client.get(f"/api/workout-plans/{plan['id']}", headers=auth_headers).json()["exercises"]] == ["ex1"]


def test_exercise_used_by_plan_cannot_be_deleted(client, auth_headers, library):
    personal = client.post(
        "/api/exercises",
        json={"name": "Goblet Squat", "muscle_groups": ["Legs"], "equipment": ["Kettlebell"]},
        headers=auth_headers
    ).json()
    plan = create_plan(client, auth_headers, exercises=[{"exercise_id": "ex1"}, {"exercise_id": personal["id"]}])

    res = client.delete(f"/api/exercises/{personal['id']}", headers=auth_headers)
    assert res.status_code == 409

    # The plan stays editable
    res = client.put(f"/api/workout-plans/{plan['id']}", json={"name": "Leg Day"}, headers=auth_headers)
    assert res.status_code == 200, res.text

    client.delete(f"/api/workout-plans/{plan['id']}/exercises/1", headers=auth_headers)
    assert client.delete(f"/api/exercises/{personal['id']}", headers=auth_headers).status_code == 200


def test_exercise_filter_options(client, auth_headers):
    res = client.get("/api/exercises/filters", headers=auth_headers)
    assert res.status_code == 200
    options = res.json()
    assert "Chest" in options["muscle_groups"]
    assert "Kettlebell" in options["equipment"]
    assert options["difficulties"] == ["beginner", "intermediate", "advanced"]


def test_deleting_client_clears_plan_assignments(client, auth_headers, library):
    plan = create_plan(client, auth_headers)
    anna = client.post("/api/clients", json={"name": "Anna Kowalska"}, headers=auth_headers).json()
    ewa = client.post("/api/clients", json={"name": "Ewa Wiśniewska"}, headers=auth_headers).json()
    client.post(
        f"/api/workout-plans/{plan['id']}/assign",
        json={"client_ids": [anna["id"], ewa["id"]]},
        headers=auth_headers
    )

    assert client.delete(f"/api/clients/{anna['id']}", headers=auth_headers).status_code == 200
    updated = client.get(f"/api/workout-plans/{plan['id']}", headers=auth_headers).json()
    assert updated["client_assignments"] == [ewa["id"]]
