from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, Optional
from .errors import ConfigurationError, FormatError, ProviderError, ProviderErrorKind, classify_provider_message
from .settings import settings

logger = logging.getLogger(__name__)

_AUTH_STATUSES = {"UNAUTHENTICATED", "PERMISSION_DENIED"}
_AUTH_REASONS = {"API_KEY_INVALID", "API_KEY_EXPIRED", "API_KEY_SERVICE_BLOCKED"}


def _error_details(response: httpx.Response) -> Dict[str, Any]:
	try:
		body = response.json()
	except ValueError:
		return {}
	error = body.get("error") if isinstance(body, dict) else None
	return error if isinstance(error, dict) else {}


def classify_http_error(status_code: int, error: Dict[str, Any]) -> ProviderErrorKind:
	"""Map a Gemini error reply to a provider error kind.

	Uses the HTTP status, the google.rpc status name and ErrorInfo reasons first; the
	message text is only consulted when none of those say anything.
	"""
	status = str(error.get("status") or "")
	reasons = {
		str(d.get("reason"))
		for d in error.get("details") or []
		if isinstance(d, dict) and d.get("reason")
	}
	if status_code in (401, 403) or status in _AUTH_STATUSES or reasons & _AUTH_REASONS:
		return ProviderErrorKind.AUTH
	if status_code == 429 or status == "RESOURCE_EXHAUSTED":
		return ProviderErrorKind.RATE_LIMIT
	return classify_provider_message(str(error.get("message") or ""))


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		timeout: Optional[float] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise ConfigurationError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_model
		self.provider = settings.gemini_provider
		if self.provider == "vertex":
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		self._client = httpx.AsyncClient(
			timeout=timeout if timeout is not None else settings.provider_timeout_seconds,
			transport=transport,
		)

	async def generate(
		self,
		prompt: str,
		*,
		system_instruction: Optional[str] = None,
		temperature: Optional[float] = None,
		response_mime_type: Optional[str] = None,
	) -> str:
		payload: Dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
		if system_instruction:
			payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
		generation_config: Dict[str, Any] = {}
		if temperature is not None:
			generation_config["temperature"] = temperature
		if response_mime_type:
			generation_config["responseMimeType"] = response_mime_type
		if generation_config:
			payload["generationConfig"] = generation_config
		return await self._post_payload(payload)

	async def _post_payload(self, payload: Dict[str, Any]) -> str:
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		try:
			r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			error = _error_details(http_err.response)
			kind = classify_http_error(http_err.response.status_code, error)
			message = str(error.get("message") or f"Gemini request failed with status {http_err.response.status_code}")
			logger.warning("Gemini call failed (%s, %s): %s", http_err.response.status_code, kind.value, message)
			raise ProviderError(message, kind=kind, provider_status=http_err.response.status_code) from http_err
		except httpx.TimeoutException as timeout_err:
			raise ProviderError("Gemini request timed out", kind=ProviderErrorKind.UPSTREAM) from timeout_err
		except httpx.RequestError as net_err:
			raise ProviderError(f"Could not reach Gemini: {net_err}", kind=ProviderErrorKind.UPSTREAM) from net_err
		try:
			data = r.json()
			text = data["candidates"][0]["content"]["parts"][0]["text"]
		except (ValueError, KeyError, IndexError, TypeError):
			logger.warning("Unexpected Gemini response: %s", r.text[:500])
			raise FormatError("No response from AI model") from None
		if not isinstance(text, str) or not text.strip():
			raise FormatError("No response from AI model")
		return text

	async def aclose(self) -> None:
		await self._client.aclose()
