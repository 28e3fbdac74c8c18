from app.database import QueryResult, query
from app.services import enrollments as enrollment_service


def test_enroll_creates_one_row(app, client, student, make_course):
    course = make_course("Enroll me")
    res = client.post(f"/api/courses/{course['id']}/enroll", headers=student[1])
    assert res.status_code == 201
    body = res.get_json()
    assert body["success"] is True
    assert body["enrollment"]["course_id"] == course["id"]
    assert body["enrollment"]["completion_percentage"] == 0


def test_enroll_twice_fails_and_keeps_one_row(app, client, student, make_course):
    course = make_course("Once only")
    client.post(f"/api/courses/{course['id']}/enroll", headers=student[1])
    res = client.post(f"/api/courses/{course['id']}/enroll", headers=student[1])

    assert res.status_code == 400
    assert res.get_json() == {"error": "Already enrolled in this course"}
    with app.app_context():
        rows = query(
            "SELECT id FROM enrollments WHERE user_id = :u AND course_id = :c",
            {"u": student[0]["id"], "c": course["id"]},
        )
    assert rows.row_count == 1


def test_enroll_updates_student_count(client, register_user, make_course):
    course = make_course("Counted")
    for email in ("a@example.com", "b@example.com"):
        _, headers = register_user(email)
        client.post(f"/api/courses/{course['id']}/enroll", headers=headers)
    assert client.get(f"/api/courses/{course['id']}").get_json()["student_count"] == 2


def test_enroll_unknown_course(client, student):
    assert client.post("/api/courses/404/enroll", headers=student[1]).status_code == 404


def test_enroll_requires_token(client, make_course):
    course = make_course("Private")
    assert client.post(f"/api/courses/{course['id']}/enroll").status_code == 401


def test_enrollment_check_and_listing(client, student, make_course, make_lesson):
    course = make_course("Listed")
    lesson = make_lesson(course["id"], "Only lesson")
    other = make_course("Not joined")

    client.post(f"/api/courses/{course['id']}/enroll", headers=student[1])
    client.post(f"/api/progress/lessons/{lesson['id']}/complete", headers=student[1])

    assert client.get(f"/api/enrollments/check/{course['id']}", headers=student[1]).get_json()["enrolled"]
    assert not client.get(f"/api/enrollments/check/{other['id']}", headers=student[1]).get_json()["enrolled"]

    listing = client.get("/api/enrollments", headers=student[1]).get_json()
    assert len(listing) == 1
    assert listing[0]["course_title"] == "Listed"
    assert listing[0]["completion_percentage"] == 100
    assert listing[0]["completed_at"] is not None


def test_complete_lesson_is_idempotent(app, client, student, make_course, make_lesson):
    course = make_course("Repeatable")
    lesson = make_lesson(course["id"], "L1")

    for _ in range(2):
        res = client.post(f"/api/progress/lessons/{lesson['id']}/complete", headers=student[1])
        assert res.status_code == 200
        progress = res.get_json()["progress"]
        assert progress["completed"] is True
        assert progress["progress_percentage"] == 100

    with app.app_context():
        rows = query(
            "SELECT completed, progress_percentage FROM lesson_progress WHERE user_id = :u AND lesson_id = :l",
            {"u": student[0]["id"], "l": lesson["id"]},
        ).rows
    assert len(rows) == 1
    assert bool(rows[0]["completed"]) is True
    assert rows[0]["progress_percentage"] == 100


def test_complete_unknown_lesson(client, student):
    assert client.post("/api/progress/lessons/77/complete", headers=student[1]).status_code == 404


def test_progress_for_course_without_lessons_is_zero(client, student, make_course):
    course = make_course("Empty")
    body = client.get(f"/api/progress/courses/{course['id']}", headers=student[1]).get_json()
    assert body == {"lessons": [], "completed": 0, "total": 0, "completionPercentage": 0}


def test_partial_progress_never_uncompletes(client, student, make_course, make_lesson):
    course = make_course("Partial")
    lesson = make_lesson(course["id"], "Video")
    url = f"/api/progress/lessons/{lesson['id']}"

    res = client.put(url, json={"progress_percentage": 140}, headers=student[1])
    assert res.get_json()["progress"]["progress_percentage"] == 100
    assert res.get_json()["progress"]["completed"] is True

    res = client.put(url, json={"progress_percentage": 30}, headers=student[1])
    assert res.get_json()["progress"]["completed"] is True
    assert res.get_json()["progress"]["progress_percentage"] == 100


def test_partial_progress_below_full(client, student, make_course, make_lesson):
    course = make_course("Half watched")
    lesson = make_lesson(course["id"], "Video")

    res = client.put(f"/api/progress/lessons/{lesson['id']}", json={"progress_percentage": 40},
                     headers=student[1])
    progress = res.get_json()["progress"]
    assert progress["completed"] is False
    assert progress["progress_percentage"] == 40

    res = client.put(f"/api/progress/lessons/{lesson['id']}", json={}, headers=student[1])
    assert res.status_code == 400


def test_end_to_end_course_progress(client, register_user):
    _, author = register_user("author@example.com", role="instructor")
    course = client.post("/api/courses", json={"title": "E2E", "description": "Flow"},
                         headers=author).get_json()
    lesson_ids = []
    for position in (1, 2):
        lesson = client.post(f"/api/courses/{course['id']}/lessons",
                             json={"title": f"Lesson {position}", "position": position},
                             headers=author).get_json()
        lesson_ids.append(lesson["id"])

    _, learner = register_user("learner@example.com")
    assert client.post(f"/api/courses/{course['id']}/enroll", headers=learner).status_code == 201
    assert client.post(f"/api/progress/lessons/{lesson_ids[0]}/complete", headers=learner).status_code == 200

    body = client.get(f"/api/progress/courses/{course['id']}", headers=learner).get_json()
    assert body["completed"] == 1
    assert body["total"] == 2
    assert body["completionPercentage"] == 50
    assert [l["completed"] for l in body["lessons"]] == [True, False]

    enrollment = client.get("/api/enrollments", headers=learner).get_json()[0]
    assert enrollment["completion_percentage"] == 50
    assert enrollment["completed_at"] is None


def test_progress_is_per_user(client, register_user, make_course, make_lesson):
    course = make_course("Shared")
    lesson = make_lesson(course["id"], "L1")
    _, first = register_user("first@example.com")
    _, second = register_user("second@example.com")

    client.post(f"/api/progress/lessons/{lesson['id']}/complete", headers=first)
    body = client.get(f"/api/progress/courses/{course['id']}", headers=second).get_json()
    assert body["completed"] == 0
    assert body["completionPercentage"] == 0


def test_concurrent_enroll_hits_unique_constraint(app, client, student, make_course, monkeypatch):
    course = make_course("Raced")
    client.post(f"/api/courses/{course['id']}/enroll", headers=student[1])

    # the second request's lookup ran before the first insert committed
    monkeypatch.setattr(enrollment_service, "query", lambda sql, params=None: QueryResult([], 0))
    res = client.post(f"/api/courses/{course['id']}/enroll", headers=student[1])

    assert res.status_code == 400
    assert res.get_json() == {"error": "Already enrolled in this course"}
    monkeypatch.undo()
    with app.app_context():
        rows = query(
            "SELECT id FROM enrollments WHERE user_id = :u AND course_id = :c",
            {"u": student[0]["id"], "c": course["id"]},
        )
    assert rows.row_count == 1
    assert client.get(f"/api/courses/{course['id']}").get_json()["student_count"] == 1


def test_enroll_counts_lessons_completed_beforehand(client, student, make_course, make_lesson):
    course = make_course("Previewed")
    first = make_lesson(course["id"], "Free preview")
    make_lesson(course["id"], "Paid part")
    client.post(f"/api/progress/lessons/{first['id']}/complete", headers=student[1])

    res = client.post(f"/api/courses/{course['id']}/enroll", headers=student[1])
    assert res.status_code == 201
    assert res.get_json()["enrollment"]["completion_percentage"] == 50
