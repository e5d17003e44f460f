"""
Tests for gamification/api/routes.py

Routes run against the in-memory SQLite session via a get_db override.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from database import get_db
from gamification.api.routes import router
from shared.models.entities import Student


@pytest.fixture
def client(db_session, env_settings):
    app = FastAPI()
    app.include_router(router)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


# ===========================================================================
# Preview endpoints
# ===========================================================================

class TestPreviewGrading:

    def test_mixed_marks(self, client):
        resp = client.post("/gamification/score/grading", json={
            "skill_marks": ["GREEN", "GREEN", "GREEN", "YELLOW"],
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["class_pts"] == 7
        assert data["class_xp"] == 88
        assert data["grading_xp"] == 88
        assert data["is_legendary"] is False
        assert data["rating"] == "good"

    def test_numeric_and_unset_marks(self, client):
        resp = client.post("/gamification/score/grading", json={
            "skill_marks": [2, None, 1, None],
        })
        assert resp.status_code == 200
        assert resp.json()["class_pts"] == 3
        assert resp.json()["class_xp"] == 75

    def test_legendary_session(self, client):
        resp = client.post("/gamification/score/grading", json={
            "skill_marks": [2, 2, 2, 2],
            "coach_bonus": 1,
            "homework": 4,
            "coach_bonus_enabled": True,
            "homework_enabled": True,
            "consecutive_classes": 5,
        })
        data = resp.json()
        assert data["grading_xp"] == 110
        assert data["is_legendary"] is True
        assert data["streak_bonus"] == 10

    def test_out_of_range_mark_is_422(self, client):
        resp = client.post("/gamification/score/grading", json={"skill_marks": [3]})
        assert resp.status_code == 422

    def test_negative_bonus_is_422(self, client):
        resp = client.post("/gamification/score/grading", json={
            "skill_marks": [2],
            "coach_bonus": -1,
        })
        assert resp.status_code == 422

    @pytest.mark.parametrize("body", [
        {"skill_marks": [True, True]},
        {"skill_marks": [1.0, 2.0]},
        {"skill_marks": [2, 2], "coach_bonus": True, "coach_bonus_enabled": True},
        {"skill_marks": [2], "homework": 1.0, "homework_enabled": True},
        {"skill_marks": [2], "consecutive_classes": False},
        {"skill_marks": [2], "coach_bonus": 1, "coach_bonus_enabled": 1},
    ])
    def test_booleans_and_floats_are_not_coerced(self, client, body):
        resp = client.post("/gamification/score/grading", json=body)
        assert resp.status_code == 422


class TestPreviewChallenge:

    def test_coach_pick_with_video(self, client):
        resp = client.post("/gamification/score/challenge", json={
            "challenge_type": "coach_pick",
            "difficulty_tier": "HARD",
            "has_video_proof": True,
        })
        assert resp.status_code == 200
        assert resp.json() == {"local_xp": 70, "global_rank_score": 25}

    def test_epic_outside_weekly_is_422(self, client):
        resp = client.post("/gamification/score/challenge", json={
            "challenge_type": "general",
            "difficulty_tier": "EPIC",
        })
        assert resp.status_code == 422
        assert "weekly" in resp.json()["detail"]


# ===========================================================================
# Student endpoints
# ===========================================================================

class TestStudentRewards:

    def test_record_grading_updates_totals(self, client, db_session, sample_student):
        resp = client.post("/gamification/students/student-1/grading", json={
            "skill_marks": ["GREEN", "YELLOW"],
        })
        assert resp.status_code == 200
        db_session.expire_all()
        row = db_session.query(Student).filter_by(id="student-1").first()
        assert row.current_stripe_points == 3
        assert row.lifetime_xp == 75

    def test_record_challenge_updates_totals(self, client, db_session, sample_student):
        resp = client.post("/gamification/students/student-1/challenges", json={
            "challenge_type": "general",
            "difficulty_tier": "EASY",
            "has_video_proof": True,
        })
        assert resp.status_code == 200
        db_session.expire_all()
        row = db_session.query(Student).filter_by(id="student-1").first()
        assert row.lifetime_xp == 10
        assert row.global_xp == 3

    def test_boolean_mark_writes_nothing(self, client, db_session, sample_student):
        resp = client.post("/gamification/students/student-1/grading", json={
            "skill_marks": [True, True],
        })
        assert resp.status_code == 422
        db_session.expire_all()
        row = db_session.query(Student).filter_by(id="student-1").first()
        assert row.current_stripe_points == 0
        assert row.lifetime_xp == 0
        assert row.global_xp == 0

    def test_video_review_requires_a_boolean(self, client, sample_student):
        resp = client.post("/gamification/students/student-1/video-reviews", json={"approved": 1})
        assert resp.status_code == 422

    def test_unknown_student_is_404(self, client):
        resp = client.post("/gamification/students/ghost/challenges", json={
            "challenge_type": "general",
            "difficulty_tier": "EASY",
        })
        assert resp.status_code == 404

    def test_video_review(self, client, sample_student):
        resp = client.post("/gamification/students/student-1/video-reviews", json={"approved": False})
        assert resp.status_code == 200
        assert resp.json() == {"tier": "unverified", "approval_streak": 0, "rejection_count": 1}

    def test_progress(self, client, sample_student):
        client.post("/gamification/students/student-1/challenges", json={
            "challenge_type": "coach_pick",
            "difficulty_tier": "EASY",
            "has_video_proof": True,
        })
        resp = client.get("/gamification/students/student-1/progress")
        assert resp.status_code == 200
        data = resp.json()
        assert data["lifetime_xp"] == 20
        assert data["global_xp"] == 5
        assert data["trust"]["tier"] == "unverified"
        assert data["avatar"]["current_tier"]["name"] == "Dojo Initiate"
        assert data["avatar"]["xp_needed"] == 95
