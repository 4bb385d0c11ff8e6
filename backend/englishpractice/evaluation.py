"""Server side of ``POST /api/evaluate``.

Each request is handled independently: validate the submission, check the provider is
configured, build the rubric prompt, call the model once and check the reply has a
numeric score. Failures surface as typed errors from ``errors``; nothing is retried.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List

from .errors import ConfigurationError, FormatError, InvalidEvaluationType, MissingField, ValidationError
from .gemini_client import GeminiClient
from .prompts import SYSTEM_INSTRUCTION, build_evaluation_prompt
from .schemas import EvaluationKind, EvaluationRequest
from .settings import settings

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("type", "content", "prompt", "level")
TEMPERATURE = 0.7


def _is_missing(name: str, value: Any) -> bool:
	if value is None:
		return True
	if isinstance(value, str):
		return not value.strip()
	# A non-string type is reported as an invalid type below
	return name != "type"


def validate_request(payload: Any) -> EvaluationRequest:
	if not isinstance(payload, dict):
		raise ValidationError("Request body must be a JSON object")
	missing: List[str] = [name for name in REQUIRED_FIELDS if _is_missing(name, payload.get(name))]
	if missing:
		raise MissingField(missing)
	if not isinstance(payload["type"], str):
		raise InvalidEvaluationType(payload["type"])
	try:
		kind = EvaluationKind(payload["type"])
	except ValueError:
		raise InvalidEvaluationType(payload["type"]) from None
	return EvaluationRequest(
		type=kind,
		content=payload["content"],
		prompt=payload["prompt"],
		level=payload["level"],
	)


def _extract_json_object(text: str) -> Any:
	try:
		return json.loads(text)
	except ValueError:
		pass
	code_block = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
	if code_block:
		try:
			return json.loads(code_block.group(1))
		except ValueError:
			pass
	raise FormatError("Invalid response format from AI model")


def parse_evaluation(text: str) -> Dict[str, Any]:
	evaluation = _extract_json_object(text)
	if not isinstance(evaluation, dict):
		raise FormatError("Invalid response format from AI model")
	score = evaluation.get("score")
	if isinstance(score, bool) or not isinstance(score, (int, float)):
		raise FormatError("Invalid evaluation response: missing score")
	return evaluation


async def evaluate_submission(payload: Any) -> Dict[str, Any]:
	req = validate_request(payload)
	if not settings.gemini_api_key:
		raise ConfigurationError(
			"Gemini API key is not configured. Please set GEMINI_API_KEY in your environment variables."
		)
	prompt = build_evaluation_prompt(req, settings.feedback_language)
	client = GeminiClient(api_key=settings.gemini_api_key)
	try:
		text = await client.generate(
			prompt,
			system_instruction=SYSTEM_INSTRUCTION,
			temperature=TEMPERATURE,
			response_mime_type="application/json",
		)
	finally:
		await client.aclose()
	try:
		return parse_evaluation(text)
	except FormatError as exc:
		logger.error("Rejected %s evaluation from model: %s", req.type.value, exc.message)
		raise
