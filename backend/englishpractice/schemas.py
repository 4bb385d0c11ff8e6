from __future__ import annotations
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class EvaluationKind(str, Enum):
	WRITING = "writing"
	SPEAKING = "speaking"


class EvaluationRequest(BaseModel):
	type: EvaluationKind
	content: str = Field(min_length=1)
	prompt: str = Field(min_length=1)
	level: str = Field(min_length=1)


# ---- rubric returned by the model ----
# Lenient on purpose: only ``score`` is guaranteed by the endpoint, the rest is display text.

class _Rubric(BaseModel):
	model_config = ConfigDict(extra="allow", populate_by_name=True)


class GrammarAssessment(_Rubric):
	assessment: str = ""
	errors: List[str] = Field(default_factory=list)
	examples: List[str] = Field(default_factory=list)
	suggestions: List[str] = Field(default_factory=list)


class VocabularyAssessment(_Rubric):
	assessment: str = ""
	strengths: List[str] = Field(default_factory=list)
	suggestions: List[str] = Field(default_factory=list)


class StructureAssessment(_Rubric):
	assessment: str = ""
	strengths: List[str] = Field(default_factory=list)
	improvements: List[str] = Field(default_factory=list)


class ContentAssessment(_Rubric):
	assessment: str = ""
	relevance: str = ""
	ideas: str = ""


class PronunciationAssessment(_Rubric):
	assessment: str = ""
	strengths: List[str] = Field(default_factory=list)
	issues: List[str] = Field(default_factory=list)
	suggestions: List[str] = Field(default_factory=list)


class FluencyAssessment(_Rubric):
	assessment: str = ""
	pace: str = ""
	hesitations: str = ""
	suggestions: List[str] = Field(default_factory=list)


class WritingOverall(_Rubric):
	strengths: List[str] = Field(default_factory=list)
	improvements: List[str] = Field(default_factory=list)
	next_steps: List[str] = Field(default_factory=list, alias="nextSteps")


class SpeakingOverall(_Rubric):
	strengths: List[str] = Field(default_factory=list)
	improvements: List[str] = Field(default_factory=list)
	practice_suggestions: List[str] = Field(default_factory=list, alias="practiceSuggestions")


class WritingEvaluation(_Rubric):
	score: float
	grammar: GrammarAssessment = Field(default_factory=GrammarAssessment)
	vocabulary: VocabularyAssessment = Field(default_factory=VocabularyAssessment)
	structure: StructureAssessment = Field(default_factory=StructureAssessment)
	content: ContentAssessment = Field(default_factory=ContentAssessment)
	overall: WritingOverall = Field(default_factory=WritingOverall)
	feedback: str = ""


class SpeakingEvaluation(_Rubric):
	score: float
	pronunciation: PronunciationAssessment = Field(default_factory=PronunciationAssessment)
	fluency: FluencyAssessment = Field(default_factory=FluencyAssessment)
	grammar: GrammarAssessment = Field(default_factory=GrammarAssessment)
	vocabulary: VocabularyAssessment = Field(default_factory=VocabularyAssessment)
	content: ContentAssessment = Field(default_factory=ContentAssessment)
	overall: SpeakingOverall = Field(default_factory=SpeakingOverall)
	feedback: str = ""


# ---- progress / practice route bodies ----

class SkillUpdateRequest(BaseModel):
	value: float


class TimeRequest(BaseModel):
	minutes: int


class QuizResultRequest(BaseModel):
	skill: str
	correct: int = Field(ge=0)
	total: int = Field(gt=0)
	minutes: int = 0


class WritingDraftRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	content: str
	target_words: int = Field(gt=0, alias="targetWords")
	minutes: int = 0


class SpeakingRecordingRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	elapsed_seconds: float = Field(ge=0, alias="elapsedSeconds")
	duration_seconds: float = Field(gt=0, alias="durationSeconds")


class EvaluatedActivityRequest(BaseModel):
	type: EvaluationKind
	score: float
	minutes: int = 0
