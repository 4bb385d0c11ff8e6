"""Learner progress: four bounded skill scores, practice time, completed activities and an achievement tier.

The reducers below are pure: each takes a ``ProgressState`` and returns a new one.
``ProgressStore`` applies the reducers to the stored state and writes the full state back
after every mutation. Mutations on one storage key are serialized within the process, so
concurrent requests cannot overwrite each other's updates.
"""
from __future__ import annotations

import json
import logging
import math
import threading
from enum import Enum
from numbers import Real
from typing import Any, Callable, Dict, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import InvalidArgument, InvalidSkillKind
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "english-learning-progress"

# Completed-activity counts that raise the achievement tier
MILESTONES: Tuple[int, ...] = (1, 5, 10, 25, 50, 100)
# (mean skill score, tier)
OVERALL_TIERS: Tuple[Tuple[int, int], ...] = ((50, 150), (75, 175))
MASTER_TIER = 200


class Skill(str, Enum):
	READING = "reading"
	WRITING = "writing"
	LISTENING = "listening"
	SPEAKING = "speaking"


SkillLike = Union[Skill, str]


def parse_skill(value: Any) -> Skill:
	if isinstance(value, Skill):
		return value
	try:
		return Skill(value)
	except ValueError:
		raise InvalidSkillKind(value) from None


def round_half_up(value: float) -> int:
	return math.floor(value + 0.5)


def clamp_percentage(value: Any) -> int:
	if isinstance(value, bool) or not isinstance(value, Real):
		raise InvalidArgument(f"Skill value must be a number, got {value!r}")
	if not math.isfinite(value):
		raise InvalidArgument(f"Skill value must be finite, got {value!r}")
	return round_half_up(min(100, max(0, value)))


def validate_minutes(minutes: Any) -> int:
	if isinstance(minutes, bool) or not isinstance(minutes, int):
		raise InvalidArgument(f"minutes must be a whole number, got {minutes!r}")
	if minutes < 0:
		raise InvalidArgument(f"minutes must not be negative, got {minutes}")
	return minutes


class SkillScores(BaseModel):
	model_config = ConfigDict(frozen=True)

	reading: int = 0
	writing: int = 0
	listening: int = 0
	speaking: int = 0

	@field_validator("reading", "writing", "listening", "speaking", mode="before")
	@classmethod
	def _bounded(cls, value: Any) -> int:
		try:
			return clamp_percentage(value)
		except InvalidArgument as exc:
			raise ValueError(exc.message) from exc

	def get(self, skill: SkillLike) -> int:
		return getattr(self, parse_skill(skill).value)

	def mean(self) -> float:
		return sum(self.get(skill) for skill in Skill) / len(Skill)

	def all_mastered(self) -> bool:
		return all(self.get(skill) >= 100 for skill in Skill)


class ProgressState(BaseModel):
	model_config = ConfigDict(frozen=True, populate_by_name=True)

	total_completed: int = Field(default=0, ge=0, alias="totalCompleted")
	total_time: int = Field(default=0, ge=0, alias="totalTime")
	overall_progress: int = Field(default=0, alias="overallProgress")
	achievements: int = Field(default=0, ge=0)
	skills: SkillScores = Field(default_factory=SkillScores)

	def to_dict(self) -> Dict[str, Any]:
		return self.model_dump(by_alias=True)


# ---- reducers ----

def recompute(state: ProgressState) -> ProgressState:
	"""Derive overallProgress and the skill-based tiers from the current skills."""
	mean = state.skills.mean()
	achievements = state.achievements
	for threshold, tier in OVERALL_TIERS:
		if mean >= threshold:
			achievements = max(achievements, tier)
	if state.skills.all_mastered():
		achievements = max(achievements, MASTER_TIER)
	return state.model_copy(update={"overall_progress": round_half_up(mean), "achievements": achievements})


def update_progress(state: ProgressState, skill: SkillLike, value: Any) -> ProgressState:
	# Absolute overwrite: a skill may go down while achievements never do
	skill = parse_skill(skill)
	skills = state.skills.model_copy(update={skill.value: clamp_percentage(value)})
	return recompute(state.model_copy(update={"skills": skills}))


def add_time(state: ProgressState, minutes: Any) -> ProgressState:
	return state.model_copy(update={"total_time": state.total_time + validate_minutes(minutes)})


def complete_activity(state: ProgressState) -> ProgressState:
	previous = state.total_completed
	total = previous + 1
	achievements = state.achievements
	for milestone in MILESTONES:
		if previous < milestone <= total:
			achievements = max(achievements, milestone)
	return state.model_copy(update={"total_completed": total, "achievements": achievements})


def dump_state(state: ProgressState) -> str:
	return json.dumps(state.to_dict())


def load_state(raw: str) -> ProgressState:
	"""Parse a stored blob; the stored overallProgress is ignored and recomputed."""
	return recompute(ProgressState.model_validate(json.loads(raw)))


Change = Callable[[ProgressState], ProgressState]

_key_locks: Dict[str, threading.Lock] = {}
_key_locks_guard = threading.Lock()


def _lock_for(key: str) -> threading.Lock:
	with _key_locks_guard:
		return _key_locks.setdefault(key, threading.Lock())


class ProgressStore:
	def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY) -> None:
		self.storage = storage
		self.key = key
		self._state = self._rehydrate()

	@property
	def state(self) -> ProgressState:
		return self._state

	def update_progress(self, skill: SkillLike, value: Any) -> ProgressState:
		return self.apply(lambda state: update_progress(state, skill, value))

	def add_time(self, minutes: Any) -> ProgressState:
		return self.apply(lambda state: add_time(state, minutes))

	def complete_activity(self) -> ProgressState:
		return self.apply(complete_activity)

	def apply(self, *changes: Change) -> ProgressState:
		"""Re-read the stored state, run ``changes`` on it in order and persist the result once.

		If any change raises, nothing is written.
		"""
		with _lock_for(self.key):
			state = self._rehydrate()
			for change in changes:
				state = change(state)
			return self._commit(state)

	def _commit(self, state: ProgressState) -> ProgressState:
		self.storage.set_item(self.key, dump_state(state))
		self._state = state
		return state

	def _rehydrate(self) -> ProgressState:
		raw = self.storage.get_item(self.key)
		if raw is None:
			return ProgressState()
		try:
			return load_state(raw)
		except ValueError as exc:
			logger.warning("Discarding unreadable progress stored under %r: %s", self.key, exc)
			return ProgressState()
