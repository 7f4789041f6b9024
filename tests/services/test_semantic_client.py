# tests/services/test_semantic_client.py
import json

import httpx
import pytest

from app.core.config import Settings
from app.models.category import CategoryPublic
from app.models.enums import ValidationStatus
from app.services import semantic_client
from app.services.semantic_client import (
    GeminiSemanticClient,
    SemanticClientError,
    SemanticErrorType,
    WebhookSemanticClient,
    build_semantic_client,
    parse_verdict,
)
from app.services.validators.semantic_validator import SemanticValidator

WEBHOOK_URL = "https://hooks.example.test/webhook/chat"

def _client_returning(handler) -> WebhookSemanticClient:
    return WebhookSemanticClient(WEBHOOK_URL, timeout_seconds=1.0, http_client=httpx.Client(transport=httpx.MockTransport(handler)))

def test_webhook_sends_chat_input_and_reads_boolean_verdict():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"valid": True})

    verdict = _client_returning(handler).ask("Is 'dog' a valid example of the category 'Animal'?")

    assert seen["url"] == WEBHOOK_URL
    assert seen["body"] == {"chatInput": "Is 'dog' a valid example of the category 'Animal'?"}
    assert verdict.valid is True
    assert verdict.confidence == 1.0
    assert verdict.reasoning

def test_webhook_reads_rich_verdict_wrapped_in_a_list():
    def handler(request):
        return httpx.Response(200, json=[{"valid": False, "confidence": 0.82, "reasoning": "A city, not an animal"}])

    verdict = _client_returning(handler).ask("prompt")
    assert verdict.valid is False
    assert verdict.confidence == pytest.approx(0.82)
    assert verdict.reasoning == "A city, not an animal"

@pytest.mark.parametrize("status_code, error_type", [
    (401, SemanticErrorType.AUTHENTICATION_ERROR),
    (429, SemanticErrorType.RATE_LIMIT_EXCEEDED),
    (500, SemanticErrorType.API_ERROR),
])
def test_webhook_http_errors_are_classified(status_code, error_type):
    client = _client_returning(lambda request: httpx.Response(status_code, text="nope"))
    with pytest.raises(SemanticClientError) as exc_info:
        client.ask("prompt")
    assert exc_info.value.error_type == error_type
    assert exc_info.value.client_name == "webhook"

def test_webhook_timeout_is_reported_as_timeout():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(SemanticClientError) as exc_info:
        _client_returning(handler).ask("prompt")
    assert exc_info.value.error_type == SemanticErrorType.TIMEOUT

def test_webhook_connection_failure_is_a_network_error():
    def handler(request):
        raise httpx.ConnectError("no route", request=request)

    with pytest.raises(SemanticClientError) as exc_info:
        _client_returning(handler).ask("prompt")
    assert exc_info.value.error_type == SemanticErrorType.NETWORK_ERROR

@pytest.mark.parametrize("body", ["not json at all", json.dumps({"answer": "yes"}), json.dumps([])])
def test_webhook_unexpected_bodies_are_parsing_errors(body):
    client = _client_returning(lambda request: httpx.Response(200, text=body))
    with pytest.raises(SemanticClientError) as exc_info:
        client.ask("prompt")
    assert exc_info.value.error_type == SemanticErrorType.PARSING_ERROR

def test_parse_verdict_clamps_confidence():
    assert parse_verdict({"valid": True, "confidence": 3.5}, "test").confidence == 1.0
    assert parse_verdict({"valid": True, "confidence": -1}, "test").confidence == 0.0

@pytest.mark.parametrize("confidence", ["NaN", "Infinity", "-Infinity"])
def test_webhook_non_finite_confidence_is_a_parsing_error(confidence):
    # json.loads accepts these tokens, so they reach the verdict parser
    body = '{"valid": true, "confidence": %s}' % confidence
    client = _client_returning(lambda request: httpx.Response(200, text=body))
    with pytest.raises(SemanticClientError) as exc_info:
        client.ask("prompt")
    assert exc_info.value.error_type == SemanticErrorType.PARSING_ERROR

def test_semantic_validator_does_not_accept_nan_verdict():
    client = _client_returning(lambda request: httpx.Response(200, text='{"valid": true, "confidence": NaN}'))
    result = SemanticValidator(client).validate("dog", CategoryPublic(name="ANIMAL", display_name="Animal"))

    assert result.status == ValidationStatus.UNCERTAIN
    assert result.confidence == 0.0
    assert "PARSING_ERROR" in result.details

def test_webhook_health_depends_on_url():
    assert WebhookSemanticClient(WEBHOOK_URL).is_healthy()
    assert not WebhookSemanticClient("  ").is_healthy()

def test_gemini_is_unhealthy_with_placeholder_key():
    assert not GeminiSemanticClient("YOUR_GEMINI_API_KEY_HERE").is_healthy()
    assert not GeminiSemanticClient("").is_healthy()
    assert GeminiSemanticClient("real-key").is_healthy()

def test_gemini_maps_schema_fields_to_verdict(mocker):
    mocker.patch.object(semantic_client.genai, "configure")
    model = mocker.MagicMock()
    model.generate_content.return_value = mocker.MagicMock(
        text=json.dumps({"is_valid": True, "confidence": 0.9, "reason": "Dogs are animals"})
    )
    mocker.patch.object(semantic_client.genai, "GenerativeModel", return_value=model)

    verdict = GeminiSemanticClient("real-key").ask("Is 'dog' a valid example of the category 'Animal'?")

    assert verdict.valid is True
    assert verdict.confidence == pytest.approx(0.9)
    assert verdict.reasoning == "Dogs are animals"
    kwargs = model.generate_content.call_args.kwargs
    assert kwargs["generation_config"]["response_mime_type"] == "application/json"

def test_gemini_bad_json_is_a_parsing_error(mocker):
    mocker.patch.object(semantic_client.genai, "configure")
    model = mocker.MagicMock()
    model.generate_content.return_value = mocker.MagicMock(text="{not json")
    mocker.patch.object(semantic_client.genai, "GenerativeModel", return_value=model)

    with pytest.raises(SemanticClientError) as exc_info:
        GeminiSemanticClient("real-key").ask("prompt")
    assert exc_info.value.error_type == SemanticErrorType.PARSING_ERROR

def test_build_semantic_client_follows_settings():
    assert isinstance(build_semantic_client(Settings(SEMANTIC_BACKEND="webhook")), WebhookSemanticClient)
    assert isinstance(build_semantic_client(Settings(SEMANTIC_BACKEND="gemini")), GeminiSemanticClient)
    assert build_semantic_client(Settings(SEMANTIC_BACKEND="none")) is None
