from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as SchemaError

from .errors import EvaluationFailed, EvaluationInProgress, MalformedResponse, MissingField, NetworkError
from .schemas import EvaluationKind, SpeakingEvaluation, WritingEvaluation
from .settings import settings

logger = logging.getLogger(__name__)

EVALUATE_PATH = "/api/evaluate"


class EvaluationClient:
	"""Sends practice submissions to the evaluation endpoint.

	One evaluation may be in flight per client; an overlapping call fails with
	``EvaluationInProgress`` instead of racing the first one.
	"""

	def __init__(
		self,
		base_url: Optional[str] = None,
		*,
		timeout: Optional[float] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.base_url = base_url or settings.evaluate_api_url
		self._client = httpx.AsyncClient(
			base_url=self.base_url,
			timeout=timeout if timeout is not None else settings.evaluate_timeout_seconds,
			transport=transport,
		)
		self._in_flight = False

	@property
	def busy(self) -> bool:
		return self._in_flight

	async def evaluate(
		self,
		kind: Union[EvaluationKind, str],
		content: str,
		prompt: str,
		level: str,
	) -> Dict[str, Any]:
		kind_value = kind.value if isinstance(kind, EvaluationKind) else kind
		fields = {"type": kind_value, "content": content, "prompt": prompt, "level": level}
		missing: List[str] = [name for name, value in fields.items() if not isinstance(value, str) or not value.strip()]
		if missing:
			raise MissingField(missing)
		if self._in_flight:
			raise EvaluationInProgress("An evaluation is already in progress. Please wait for it to finish.")
		self._in_flight = True
		try:
			return await self._post(fields)
		finally:
			self._in_flight = False

	async def evaluate_writing(self, content: str, prompt: str, level: str) -> WritingEvaluation:
		data = await self.evaluate(EvaluationKind.WRITING, content, prompt, level)
		try:
			return WritingEvaluation.model_validate(data)
		except SchemaError as exc:
			raise MalformedResponse("Invalid response format from server") from exc

	async def evaluate_speaking(self, transcript: str, prompt: str, level: str) -> SpeakingEvaluation:
		data = await self.evaluate(EvaluationKind.SPEAKING, transcript, prompt, level)
		try:
			return SpeakingEvaluation.model_validate(data)
		except SchemaError as exc:
			raise MalformedResponse("Invalid response format from server") from exc

	async def _post(self, body: Dict[str, str]) -> Dict[str, Any]:
		try:
			r = await self._client.post(EVALUATE_PATH, json=body)
		except httpx.TransportError as exc:
			logger.warning("Evaluation request to %s failed: %s", self.base_url, exc)
			raise NetworkError("Could not reach the evaluation service. Please check your connection and try again.") from exc
		if not r.is_success:
			raise EvaluationFailed(_error_message(r), r.status_code)
		try:
			data = r.json()
		except ValueError:
			data = None
		evaluation = data.get("evaluation") if isinstance(data, dict) else None
		if not isinstance(evaluation, dict):
			raise MalformedResponse("Invalid response format from server")
		return evaluation

	async def aclose(self) -> None:
		await self._client.aclose()

	async def __aenter__(self) -> "EvaluationClient":
		return self

	async def __aexit__(self, *exc_info: Any) -> None:
		await self.aclose()


def _error_message(response: httpx.Response) -> str:
	fallback = f"Evaluation failed with status {response.status_code}"
	try:
		data = response.json()
	except ValueError:
		return fallback
	message = data.get("error") if isinstance(data, dict) else None
	return message if isinstance(message, str) and message else fallback
