"""Error taxonomy shared by the evaluation endpoint, its client and the progress store.

Every error carries the message shown to the learner and the HTTP status it maps to,
so the boundary that catches it can answer with ``{"error": message}``.
"""
from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional


GENERIC_FAILURE_MESSAGE = "Failed to evaluate. Please try again."


class PracticeError(Exception):
	status_code: int = 500

	def __init__(self, message: str) -> None:
		super().__init__(message)
		self.message = message


# ---- request / argument validation (recoverable, the user corrects input) ----

class ValidationError(PracticeError):
	status_code = 400


class MissingField(ValidationError):
	def __init__(self, fields: Iterable[str]) -> None:
		self.fields: List[str] = list(fields)
		super().__init__(f"Missing required fields: {', '.join(self.fields)}")


class InvalidEvaluationType(ValidationError):
	def __init__(self, value: object = None) -> None:
		self.value = value
		super().__init__("Invalid evaluation type")


class InvalidSkillKind(ValidationError):
	def __init__(self, value: object) -> None:
		self.value = value
		super().__init__(f"Unknown skill: {value!r}. Expected one of reading, writing, listening, speaking")


class InvalidArgument(ValidationError):
	pass


# ---- server side ----

class ConfigurationError(PracticeError):
	status_code = 500


class FormatError(PracticeError):
	status_code = 500


class ProviderErrorKind(str, Enum):
	AUTH = "auth"
	RATE_LIMIT = "rate_limit"
	UPSTREAM = "upstream"


_KIND_STATUS = {
	ProviderErrorKind.AUTH: 401,
	ProviderErrorKind.RATE_LIMIT: 429,
	ProviderErrorKind.UPSTREAM: 500,
}


def classify_provider_message(message: str) -> ProviderErrorKind:
	"""Fallback classification for failures that carry no structured code."""
	if "API key" in message:
		return ProviderErrorKind.AUTH
	if "rate limit" in message.lower():
		return ProviderErrorKind.RATE_LIMIT
	return ProviderErrorKind.UPSTREAM


class ProviderError(PracticeError):
	def __init__(
		self,
		message: str,
		*,
		kind: Optional[ProviderErrorKind] = None,
		provider_status: Optional[int] = None,
	) -> None:
		super().__init__(message)
		self.kind = kind if kind is not None else classify_provider_message(message)
		self.provider_status = provider_status

	@property
	def status_code(self) -> int:  # type: ignore[override]
		return _KIND_STATUS[self.kind]

	@property
	def public_message(self) -> str:
		if self.kind is ProviderErrorKind.AUTH:
			return "Invalid Gemini API key. Please check your configuration."
		if self.kind is ProviderErrorKind.RATE_LIMIT:
			return "Rate limit exceeded. Please try again later."
		return self.message or GENERIC_FAILURE_MESSAGE

	@classmethod
	def from_exception(cls, exc: Exception) -> "ProviderError":
		if isinstance(exc, ProviderError):
			return exc
		return cls(str(exc))


# ---- evaluation client side ----

class NetworkError(PracticeError):
	status_code = 503


class EvaluationFailed(PracticeError):
	def __init__(self, message: str, status: int) -> None:
		super().__init__(message)
		self.status = status

	@property
	def status_code(self) -> int:  # type: ignore[override]
		return self.status


class MalformedResponse(PracticeError):
	status_code = 502


class EvaluationInProgress(PracticeError):
	status_code = 409
