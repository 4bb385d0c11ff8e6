from __future__ import annotations

from .errors import InvalidEvaluationType
from .schemas import EvaluationKind, EvaluationRequest


SYSTEM_INSTRUCTION = "You are a professional English language teacher. Always respond in valid JSON format."


_WRITING_SCHEMA = """{
  "score": number,
  "grammar": {"assessment": "string", "errors": ["string"], "examples": ["string"]},
  "vocabulary": {"assessment": "string", "strengths": ["string"], "suggestions": ["string"]},
  "structure": {"assessment": "string", "strengths": ["string"], "improvements": ["string"]},
  "content": {"assessment": "string", "relevance": "string"},
  "overall": {"strengths": ["string"], "improvements": ["string"], "nextSteps": ["string"]},
  "feedback": "string"
}"""

_SPEAKING_SCHEMA = """{
  "score": number,
  "pronunciation": {"assessment": "string", "strengths": ["string"], "issues": ["string"], "suggestions": ["string"]},
  "fluency": {"assessment": "string", "pace": "string", "hesitations": "string", "suggestions": ["string"]},
  "grammar": {"assessment": "string", "errors": ["string"], "suggestions": ["string"]},
  "vocabulary": {"assessment": "string", "strengths": ["string"], "suggestions": ["string"]},
  "content": {"assessment": "string", "relevance": "string", "ideas": "string"},
  "overall": {"strengths": ["string"], "improvements": ["string"], "practiceSuggestions": ["string"]},
  "feedback": "string"
}"""


def _build_writing_prompt(req: EvaluationRequest, language: str) -> str:
	return (
		"You are an English language teacher evaluating a student's writing.\n\n"
		f"Student Level: {req.level}\n"
		f"Writing Prompt: {req.prompt}\n"
		f"Student's Writing: {req.content}\n\n"
		f"Please provide a comprehensive evaluation in {language} (for the student) that includes:\n"
		"1. Overall Score (0-100)\n"
		"2. Grammar Assessment (with specific examples of errors)\n"
		"3. Vocabulary Assessment (word choice and variety)\n"
		"4. Structure and Organization\n"
		"5. Content Quality (how well they addressed the prompt)\n"
		"6. Specific Strengths\n"
		"7. Areas for Improvement\n"
		"8. Suggestions for next steps\n\n"
		"Format your response as JSON with the following structure:\n"
		f"{_WRITING_SCHEMA}\n"
		f"The feedback field holds the overall feedback in {language}."
	)


def _build_speaking_prompt(req: EvaluationRequest, language: str) -> str:
	return (
		"You are an English language teacher evaluating a student's speaking practice.\n\n"
		f"Student Level: {req.level}\n"
		f"Speaking Prompt: {req.prompt}\n"
		f"Student's Transcript: {req.content}\n\n"
		f"Please provide a comprehensive evaluation in {language} (for the student) that includes:\n"
		"1. Overall Score (0-100)\n"
		"2. Pronunciation Assessment\n"
		"3. Fluency Assessment\n"
		"4. Grammar and Vocabulary Usage\n"
		"5. Content and Ideas\n"
		"6. Specific Strengths\n"
		"7. Areas for Improvement\n"
		"8. Practice Suggestions\n\n"
		"Format your response as JSON with the following structure:\n"
		f"{_SPEAKING_SCHEMA}\n"
		f"The feedback field holds the overall feedback in {language}."
	)


def build_evaluation_prompt(req: EvaluationRequest, language: str = "Turkish") -> str:
	# User text is embedded verbatim
	if req.type is EvaluationKind.WRITING:
		return _build_writing_prompt(req, language)
	if req.type is EvaluationKind.SPEAKING:
		return _build_speaking_prompt(req, language)
	raise InvalidEvaluationType(req.type)
