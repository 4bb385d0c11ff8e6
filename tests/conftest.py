import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from englishpractice import models  # noqa: F401
from englishpractice.db import Base, get_db
from englishpractice.main import app
from englishpractice.settings import settings


WRITING_RUBRIC = {
	"score": 78,
	"grammar": {"assessment": "İyi", "errors": ["I goes -> I go"], "examples": ["I go to school."]},
	"vocabulary": {"assessment": "Yeterli", "strengths": ["routine"], "suggestions": ["usually"]},
	"structure": {"assessment": "Düzenli", "strengths": ["paragraphs"], "improvements": ["linking words"]},
	"content": {"assessment": "Konuya uygun", "relevance": "high"},
	"overall": {"strengths": ["clear"], "improvements": ["tenses"], "nextSteps": ["read more"]},
	"feedback": "Genel olarak iyi bir yazı.",
}

SPEAKING_RUBRIC = {
	"score": 64,
	"pronunciation": {"assessment": "Anlaşılır", "strengths": [], "issues": ["th"], "suggestions": ["shadowing"]},
	"fluency": {"assessment": "Orta", "pace": "slow", "hesitations": "some", "suggestions": []},
	"grammar": {"assessment": "İyi", "errors": [], "suggestions": []},
	"vocabulary": {"assessment": "Basit", "strengths": [], "suggestions": ["synonyms"]},
	"content": {"assessment": "İlgili", "relevance": "high", "ideas": "few"},
	"overall": {"strengths": [], "improvements": [], "practiceSuggestions": ["daily speaking"]},
	"feedback": "Daha fazla pratik yapın.",
}


class FakeGeminiClient:
	reply = json.dumps(WRITING_RUBRIC)
	error = None
	calls = []
	instances = 0

	def __init__(self, api_key=None, **kwargs):
		type(self).instances += 1
		self.api_key = api_key

	async def generate(self, prompt, **kwargs):
		type(self).calls.append({"prompt": prompt, **kwargs})
		if self.error is not None:
			raise self.error
		return self.reply

	async def aclose(self):
		pass


@pytest.fixture
def gemini_key(monkeypatch):
	monkeypatch.setattr(settings, "gemini_api_key", "test-key")


@pytest.fixture
def fake_gemini(monkeypatch, gemini_key):
	class Fake(FakeGeminiClient):
		reply = json.dumps(WRITING_RUBRIC)
		error = None
		calls = []
		instances = 0

	monkeypatch.setattr("englishpractice.evaluation.GeminiClient", Fake)
	return Fake


@pytest.fixture
def session_factory(tmp_path):
	engine = create_engine(
		f"sqlite:///{tmp_path / 'test.db'}",
		connect_args={"check_same_thread": False},
		future=True,
	)
	Base.metadata.create_all(bind=engine)
	yield sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)
	engine.dispose()


@pytest.fixture
def client(session_factory):
	def _get_db():
		db = session_factory()
		try:
			yield db
		finally:
			db.close()

	app.dependency_overrides[get_db] = _get_db
	yield TestClient(app)
	app.dependency_overrides.clear()
