from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def _attempt(level_key, seconds):
    r = client.post("/attempts", json={"level_key": level_key, "elapsed_seconds": seconds})
    assert r.status_code == 200
    return r.json()


def test_mastery_empty():
    r = client.get("/mastery")
    assert r.status_code == 200
    groups = r.json()
    assert len(groups) == 3
    assert all(g["mastered_count"] == 0 and g["percentage"] == 0 for g in groups)


def test_mastery_counts_best_times():
    _attempt("bonds10", 20)  # true mastery
    _attempt("bonds20", 30)  # mastery
    _attempt("bonds100", 80)  # 80 / 15 / 1.2 = 4.4, beginner
    groups = {g["key"]: g for g in client.get("/mastery").json()}
    bonds = groups["number-bonds"]
    assert bonds["mastered_count"] == 2
    assert bonds["total_count"] == 8
    assert bonds["percentage"] == 25
    assert bonds["mastered_levels"] == ["bonds10", "bonds20"]


def test_next_level():
    assert client.get("/mastery/next").json()["key"] == "bonds10"
    _attempt("bonds10", 20)
    assert client.get("/mastery/next").json()["key"] == "bonds20"


def test_level_progress():
    _attempt("hcf", 50)
    _attempt("hcf", 40)
    _attempt("hcf", 45)
    r = client.get("/progress/hcf")
    assert r.status_code == 200
    body = r.json()
    assert body["best_time"] == 40
    assert body["total_attempts"] == 3
    assert len(body["improvements"]) == 1
    assert body["improvements"][0]["percent_improvement"] == 20.0

    assert client.get("/progress/nope").status_code == 404


def test_progress_summary():
    _attempt("lcm", 60)
    _attempt("lcm", 30)
    _attempt("squares", 25)
    body = client.get("/progress/summary").json()
    assert body["total_drills"] == 2
    assert body["total_attempts"] == 3
    assert body["total_time_spent"] == 115
    assert body["drills_with_improvement"] == 1
    assert body["average_improvement"] == 50.0
