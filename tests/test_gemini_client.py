import json

import httpx
import pytest

from englishpractice.errors import ConfigurationError, FormatError, ProviderError, ProviderErrorKind
from englishpractice.gemini_client import GeminiClient, classify_http_error
from englishpractice.settings import settings


def _reply(text):
	return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _client(handler, **kwargs):
	return GeminiClient(api_key="k-123", transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.asyncio
async def test_generate_sends_generation_config_and_key(monkeypatch):
	monkeypatch.setattr(settings, "gemini_provider", "ai_studio")
	seen = {}

	def handler(request):
		seen["url"] = request.url
		seen["body"] = json.loads(request.content)
		return httpx.Response(200, json=_reply('{"score": 1}'))

	client = _client(handler, model="gemini-test")
	text = await client.generate(
		"hello",
		system_instruction="be a teacher",
		temperature=0.7,
		response_mime_type="application/json",
	)
	await client.aclose()

	assert text == '{"score": 1}'
	assert seen["url"].path == "/v1beta/models/gemini-test:generateContent"
	assert seen["url"].params["key"] == "k-123"
	body = seen["body"]
	assert body["contents"][0]["parts"][0]["text"] == "hello"
	assert body["systemInstruction"]["parts"][0]["text"] == "be a teacher"
	assert body["generationConfig"] == {"temperature": 0.7, "responseMimeType": "application/json"}


@pytest.mark.asyncio
async def test_vertex_provider_sends_key_in_header(monkeypatch):
	monkeypatch.setattr(settings, "gemini_provider", "vertex")
	monkeypatch.setattr(settings, "vertex_project", "demo")
	seen = {}

	def handler(request):
		seen["request"] = request
		return httpx.Response(200, json=_reply("ok"))

	client = _client(handler, model="gemini-test")
	await client.generate("hi")
	await client.aclose()

	request = seen["request"]
	assert request.headers["x-goog-api-key"] == "k-123"
	assert "key" not in request.url.params
	assert "/projects/demo/" in request.url.path


def test_missing_key_is_a_configuration_error(monkeypatch):
	monkeypatch.setattr(settings, "gemini_api_key", None)
	with pytest.raises(ConfigurationError):
		GeminiClient()


@pytest.mark.asyncio
@pytest.mark.parametrize(
	"status, error, kind",
	[
		(
			400,
			{
				"code": 400,
				"message": "API key not valid. Please pass a valid API key.",
				"status": "INVALID_ARGUMENT",
				"details": [{"@type": "type.googleapis.com/google.rpc.ErrorInfo", "reason": "API_KEY_INVALID"}],
			},
			ProviderErrorKind.AUTH,
		),
		(403, {"code": 403, "message": "denied", "status": "PERMISSION_DENIED"}, ProviderErrorKind.AUTH),
		(429, {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}, ProviderErrorKind.RATE_LIMIT),
		(500, {"code": 500, "message": "Internal error", "status": "INTERNAL"}, ProviderErrorKind.UPSTREAM),
	],
)
async def test_http_errors_are_classified_from_structured_fields(status, error, kind):
	client = _client(lambda request: httpx.Response(status, json={"error": error}))
	with pytest.raises(ProviderError) as info:
		await client.generate("hi")
	await client.aclose()
	assert info.value.kind is kind
	assert info.value.provider_status == status
	assert info.value.message == error["message"]


@pytest.mark.asyncio
async def test_error_without_body_still_maps_by_status():
	client = _client(lambda request: httpx.Response(429, text="slow down"))
	with pytest.raises(ProviderError) as info:
		await client.generate("hi")
	await client.aclose()
	assert info.value.status_code == 429


def test_message_fallback_when_no_structured_information():
	assert classify_http_error(400, {"message": "rate limit reached"}) is ProviderErrorKind.RATE_LIMIT
	assert classify_http_error(400, {"message": "bad request"}) is ProviderErrorKind.UPSTREAM


@pytest.mark.asyncio
async def test_timeout_becomes_provider_error():
	def handler(request):
		raise httpx.ReadTimeout("timed out", request=request)

	client = _client(handler)
	with pytest.raises(ProviderError) as info:
		await client.generate("hi")
	await client.aclose()
	assert info.value.status_code == 500


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"candidates": []}, {"promptFeedback": {}}, _reply("   ")])
async def test_empty_model_reply_is_a_format_error(payload):
	client = _client(lambda request: httpx.Response(200, json=payload))
	with pytest.raises(FormatError):
		await client.generate("hi")
	await client.aclose()
