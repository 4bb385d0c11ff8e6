from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..progress import ProgressStore
from ..schemas import SkillUpdateRequest, TimeRequest
from ..storage import SqlStorage

router = APIRouter(prefix="/api/progress", tags=["progress"])


def get_progress_store(db: Session = Depends(get_db)) -> ProgressStore:
	return ProgressStore(SqlStorage(db))


@router.get("")
def read_progress(store: ProgressStore = Depends(get_progress_store)):
	return store.state.to_dict()


@router.put("/skills/{skill}")
def update_skill(skill: str, req: SkillUpdateRequest, store: ProgressStore = Depends(get_progress_store)):
	return store.update_progress(skill, req.value).to_dict()


@router.post("/time")
def add_time(req: TimeRequest, store: ProgressStore = Depends(get_progress_store)):
	return store.add_time(req.minutes).to_dict()


@router.post("/complete")
def complete_activity(store: ProgressStore = Depends(get_progress_store)):
	return store.complete_activity().to_dict()
