"""Gamification API endpoints - scoring previews and student reward updates."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DBSession

from database import get_db
from gamification.models.domain import (
    ChallengeScore,
    ChallengeSubmission,
    GradingInput,
    GradingScore,
    TrustState,
)
from gamification.models.schemas import (
    ChallengeRequest,
    GradingRequest,
    StudentProgressResponse,
    VideoReviewRequest,
)
from gamification.services import scoring
from gamification.services.reward_service import RewardService
from shared.utils.exceptions import TaekUpException


router = APIRouter(prefix="/gamification", tags=["gamification"])


def _to_grading_input(request: GradingRequest) -> GradingInput:
    return GradingInput(
        skill_marks=[scoring.coerce_mark(mark) for mark in request.skill_marks],
        coach_bonus=scoring.require_count("coach_bonus", request.coach_bonus),
        homework=scoring.require_count("homework", request.homework),
        coach_bonus_enabled=request.coach_bonus_enabled,
        homework_enabled=request.homework_enabled,
        consecutive_classes=scoring.require_count("consecutive_classes", request.consecutive_classes),
    )


def _to_submission(request: ChallengeRequest) -> ChallengeSubmission:
    return ChallengeSubmission(**request.model_dump())


@router.post("/score/grading", response_model=GradingScore)
def preview_grading(request: GradingRequest):
    """Score a grading without saving it."""
    try:
        return scoring.score_grading(_to_grading_input(request))
    except TaekUpException as e:
        raise e.to_http_exception()


@router.post("/score/challenge", response_model=ChallengeScore)
def preview_challenge(request: ChallengeRequest):
    """Score a challenge without saving it."""
    try:
        return scoring.score_challenge(_to_submission(request))
    except TaekUpException as e:
        raise e.to_http_exception()


@router.post("/students/{student_id}/grading", response_model=GradingScore)
def record_grading(student_id: str, request: GradingRequest, db: DBSession = Depends(get_db)):
    """Score a grading and add it to the student's totals."""
    try:
        return RewardService(db).record_grading(student_id, _to_grading_input(request))
    except TaekUpException as e:
        raise e.to_http_exception()


@router.post("/students/{student_id}/challenges", response_model=ChallengeScore)
def record_challenge(student_id: str, request: ChallengeRequest, db: DBSession = Depends(get_db)):
    """Score a challenge submission and add it to the student's totals."""
    try:
        return RewardService(db).record_challenge(student_id, _to_submission(request))
    except TaekUpException as e:
        raise e.to_http_exception()


@router.post("/students/{student_id}/video-reviews", response_model=TrustState)
def review_video(student_id: str, request: VideoReviewRequest, db: DBSession = Depends(get_db)):
    """Record a coach's approve/reject decision on a video proof."""
    try:
        return RewardService(db).review_video(student_id, request.approved)
    except TaekUpException as e:
        raise e.to_http_exception()


@router.get("/students/{student_id}/progress", response_model=StudentProgressResponse)
def get_progress(student_id: str, db: DBSession = Depends(get_db)):
    try:
        return RewardService(db).get_progress(student_id)
    except TaekUpException as e:
        raise e.to_http_exception()
