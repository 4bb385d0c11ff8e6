from fastapi import APIRouter, Depends

from .. import activities
from ..progress import ProgressStore
from ..schemas import EvaluatedActivityRequest, QuizResultRequest, SpeakingRecordingRequest, WritingDraftRequest
from .progress import get_progress_store

router = APIRouter(prefix="/api/practice", tags=["practice"])


@router.post("/quiz")
def submit_quiz(req: QuizResultRequest, store: ProgressStore = Depends(get_progress_store)):
	state = activities.record_quiz(store, req.skill, req.correct, req.total, req.minutes)
	return {"score": activities.quiz_score(req.correct, req.total), "progress": state.to_dict()}


@router.post("/writing")
def save_writing(req: WritingDraftRequest, store: ProgressStore = Depends(get_progress_store)):
	state = activities.record_writing_draft(store, req.content, req.target_words, req.minutes)
	return {"wordCount": activities.count_words(req.content), "progress": state.to_dict()}


@router.post("/speaking")
def save_speaking(req: SpeakingRecordingRequest, store: ProgressStore = Depends(get_progress_store)):
	state = activities.record_speaking_recording(store, req.elapsed_seconds, req.duration_seconds)
	return {"progress": state.to_dict()}


@router.post("/evaluated")
def record_evaluated(req: EvaluatedActivityRequest, store: ProgressStore = Depends(get_progress_store)):
	state = activities.record_evaluation(store, req.type, {"score": req.score}, req.minutes)
	return {"progress": state.to_dict()}
