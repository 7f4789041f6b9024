# tests/services/test_remote_validators.py
import httpx
import pytest

from app.models.category import CategoryPublic
from app.models.enums import ValidationStatus
from app.services.semantic_client import SemanticClientError, SemanticErrorType, SemanticVerdict
from app.services.validators.dictionary_validator import (
    DictionaryValidator,
    count_keyword_matches,
    match_confidence,
)
from app.services.validators.semantic_validator import SemanticValidator

ANIMAL = CategoryPublic(name="ANIMAL", display_name="Animal")
PRENOM = CategoryPublic(name="PRENOM", display_name="First Name")

class StubSemanticClient:
    def __init__(self, verdict=None, error=None, healthy=True):
        self.verdict = verdict
        self.error = error
        self.healthy = healthy
        self.prompts = []

    def is_healthy(self):
        return self.healthy

    def ask(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.verdict

# --- Remote semantic ---

def test_semantic_prompt_uses_category_display_name():
    client = StubSemanticClient(SemanticVerdict(valid=True))
    result = SemanticValidator(client).validate("Dog", ANIMAL)

    assert client.prompts == ["Is 'dog' a valid example of the category 'Animal'?"]
    assert result.status == ValidationStatus.VALID
    assert result.confidence == 1.0
    assert result.source == "remote-semantic"

def test_semantic_confident_negative_is_invalid():
    client = StubSemanticClient(SemanticVerdict(valid=False, confidence=0.9, reasoning="It is a city"))
    result = SemanticValidator(client).validate("paris", ANIMAL)

    assert result.status == ValidationStatus.INVALID
    assert "It is a city" in result.details

def test_semantic_low_confidence_is_uncertain():
    client = StubSemanticClient(SemanticVerdict(valid=True, confidence=0.4))
    result = SemanticValidator(client, confidence_threshold=0.7).validate("dodo", ANIMAL)
    assert result.status == ValidationStatus.UNCERTAIN

def test_semantic_client_errors_become_uncertain():
    client = StubSemanticClient(error=SemanticClientError("too slow", "webhook", SemanticErrorType.TIMEOUT))
    result = SemanticValidator(client).validate("dog", ANIMAL)

    assert result.status == ValidationStatus.UNCERTAIN
    assert result.confidence == 0.0
    assert "TIMEOUT" in result.details

def test_semantic_availability_follows_client_health():
    assert SemanticValidator(StubSemanticClient(healthy=True)).is_available()
    assert not SemanticValidator(StubSemanticClient(healthy=False)).is_available()
    assert not SemanticValidator(None).is_available()

# --- Web dictionary ---

DOG_ENTRY = [{
    "word": "dog",
    "meanings": [{
        "partOfSpeech": "noun",
        "definitions": [{
            "definition": "A mammal of the family Canidae, domesticated as a pet.",
            "example": "The dog barked.",
            "synonyms": [],
        }],
        "synonyms": ["hound"],
    }],
}]

def _dictionary(handler, **kwargs) -> DictionaryValidator:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return DictionaryValidator(base_url="https://dict.example.test/api/v2", language="en", enabled=True, http_client=client, **kwargs)

def test_dictionary_keyword_match_is_valid():
    urls = []

    def handler(request):
        urls.append(str(request.url))
        return httpx.Response(200, json=DOG_ENTRY)

    result = _dictionary(handler).validate("Dog", ANIMAL)

    assert urls == ["https://dict.example.test/api/v2/entries/en/dog"]
    assert result.status == ValidationStatus.VALID
    assert result.source == "web-dictionary"
    # mammal, domesticated, pet
    assert result.confidence == pytest.approx(0.81)

def test_dictionary_not_found_is_invalid():
    result = _dictionary(lambda r: httpx.Response(404, json={"title": "No Definitions Found"})).validate("zzxqp", ANIMAL)
    assert result.status == ValidationStatus.INVALID
    assert result.confidence == 0.0

def test_dictionary_word_without_category_keywords_is_invalid():
    entry = [{"word": "table", "meanings": [{"partOfSpeech": "noun", "definitions": [{"definition": "A piece of furniture."}]}]}]
    result = _dictionary(lambda r: httpx.Response(200, json=entry)).validate("table", ANIMAL)
    assert result.status == ValidationStatus.INVALID

def test_dictionary_payload_without_identity_fields_is_invalid():
    result = _dictionary(lambda r: httpx.Response(200, json=[{"title": "odd"}])).validate("dog", ANIMAL)
    assert result.status == ValidationStatus.INVALID

def test_dictionary_category_without_keywords_is_uncertain():
    result = _dictionary(lambda r: httpx.Response(200, json=DOG_ENTRY)).validate("dog", PRENOM)
    assert result.status == ValidationStatus.UNCERTAIN
    assert result.confidence == pytest.approx(0.6)

def test_dictionary_transport_failures_are_uncertain():
    def timeout(request):
        raise httpx.ConnectTimeout("slow", request=request)

    assert _dictionary(timeout).validate("dog", ANIMAL).status == ValidationStatus.UNCERTAIN
    server_error = _dictionary(lambda r: httpx.Response(503)).validate("dog", ANIMAL)
    assert server_error.status == ValidationStatus.UNCERTAIN
    assert server_error.confidence == pytest.approx(0.5)
    garbage = _dictionary(lambda r: httpx.Response(200, text="<html>")).validate("dog", ANIMAL)
    assert garbage.status == ValidationStatus.UNCERTAIN

def test_dictionary_can_be_disabled():
    assert not DictionaryValidator(enabled=False).is_available()

def test_keyword_matching_is_word_prefix_based():
    assert count_keyword_matches("a large animals park", ["animal"]) == 1
    assert count_keyword_matches("a pineapple", ["apple"]) == 0
    assert count_keyword_matches("a pet bird", ["pet", "bird", "fish"]) == 2

def test_match_confidence_is_capped():
    assert match_confidence(1) == pytest.approx(0.77)
    assert match_confidence(20) == pytest.approx(0.85)
