from __future__ import annotations
import math
from typing import Any, Mapping, Union

from .errors import InvalidArgument, InvalidSkillKind, ValidationError
from .progress import (
	ProgressState,
	ProgressStore,
	Skill,
	SkillLike,
	add_time,
	complete_activity,
	parse_skill,
	round_half_up,
	update_progress,
	validate_minutes,
)
from .schemas import EvaluationKind, SpeakingEvaluation, WritingEvaluation


QUIZ_SKILLS = (Skill.READING, Skill.LISTENING)
QUIZ_BONUS = 10


def count_words(text: str) -> int:
	return len(text.split())


def quiz_score(correct: int, total: int) -> int:
	if total <= 0:
		raise InvalidArgument("A quiz needs at least one question")
	if correct < 0 or correct > total:
		raise InvalidArgument(f"correct must be between 0 and {total}, got {correct}")
	return min(100, round_half_up(correct / total * 100) + QUIZ_BONUS)


def writing_draft_score(word_count: int, target_words: int) -> float:
	if target_words <= 0:
		raise InvalidArgument("target_words must be positive")
	return min(100, word_count / target_words * 50 + 25)


def speaking_recording_score(elapsed_seconds: float, duration_seconds: float) -> float:
	if duration_seconds <= 0:
		raise InvalidArgument("duration_seconds must be positive")
	return min(100, elapsed_seconds / duration_seconds * 50 + 25)


def record_activity(store: ProgressStore, skill: SkillLike, value: Any, minutes: int) -> ProgressState:
	"""Apply one finished activity: set the skill, add the time, count it."""
	validate_minutes(minutes)
	return store.apply(
		lambda state: update_progress(state, skill, value),
		lambda state: add_time(state, minutes),
		complete_activity,
	)


def record_quiz(store: ProgressStore, skill: SkillLike, correct: int, total: int, minutes: int) -> ProgressState:
	skill = parse_skill(skill)
	if skill not in QUIZ_SKILLS:
		raise ValidationError("Quizzes are only available for reading and listening")
	return record_activity(store, skill, quiz_score(correct, total), minutes)


def record_writing_draft(store: ProgressStore, content: str, target_words: int, minutes: int) -> ProgressState:
	words = count_words(content)
	if words < target_words:
		raise ValidationError(f"Please write at least {target_words} words ({words} so far).")
	return record_activity(store, Skill.WRITING, writing_draft_score(words, target_words), minutes)


def record_speaking_recording(store: ProgressStore, elapsed_seconds: float, duration_seconds: float) -> ProgressState:
	value = speaking_recording_score(elapsed_seconds, duration_seconds)
	return record_activity(store, Skill.SPEAKING, value, round_half_up(elapsed_seconds / 60))


def record_evaluation(
	store: ProgressStore,
	kind: Union[EvaluationKind, str],
	evaluation: Union[Mapping[str, Any], WritingEvaluation, SpeakingEvaluation],
	minutes: int,
) -> ProgressState:
	"""Use a rubric score as the new value for the evaluated skill."""
	try:
		kind = EvaluationKind(kind)
	except ValueError:
		raise InvalidSkillKind(kind) from None
	score = evaluation.get("score") if isinstance(evaluation, Mapping) else evaluation.score
	if isinstance(score, bool) or not isinstance(score, (int, float)) or not math.isfinite(score):
		raise InvalidArgument(f"Evaluation score must be a number, got {score!r}")
	return record_activity(store, kind.value, score, minutes)
