# app/services/validators/dictionary_validator.py
import logging
import re
from typing import Any, Dict, FrozenSet, Iterable, List
from urllib.parse import quote

import httpx

from app.core.config import settings
from app.models.category import CategoryPublic
from app.models.enums import ValidationStatus
from app.models.validation import ValidationResult
from app.services.normalizer import normalize

logger = logging.getLogger("app.services.validators.dictionary")

# Categories mapped to an empty set are known but cannot be judged from definitions
CATEGORY_KEYWORDS: Dict[str, FrozenSet[str]] = {
    "ANIMAL": frozenset({
        "animal", "mammal", "bird", "fish", "reptile", "insect", "creature", "pet",
        "domesticated", "wildlife", "species", "vertebrate", "invertebrate",
    }),
    "FRUIT": frozenset({
        "fruit", "berry", "citrus", "tropical", "edible", "sweet", "juicy", "vitamin",
        "nutritious", "organic", "fresh", "ripe",
    }),
    "LEGUME": frozenset({
        "vegetable", "root", "tuber", "leaf", "legume", "bulb", "edible", "cooked", "salad",
    }),
    "PAYS": frozenset({
        "country", "nation", "republic", "kingdom", "state", "territory", "sovereign",
        "government", "capital", "continent", "border", "citizenship",
    }),
    "VILLE": frozenset({
        "city", "town", "municipality", "urban", "metropolitan", "capital", "district",
        "borough", "settlement", "population", "downtown", "suburb",
    }),
    "COULEUR": frozenset({"color", "colour", "hue", "shade", "pigment", "tint", "dye"}),
    "PRENOM": frozenset(),
    "METIER": frozenset(),
    "OBJET": frozenset(),
}

MIN_MATCH_CONFIDENCE = 0.75
MAX_MATCH_CONFIDENCE = 0.85
MATCH_CONFIDENCE_STEP = 0.02

def match_confidence(matches: int) -> float:
    return min(MAX_MATCH_CONFIDENCE, MIN_MATCH_CONFIDENCE + MATCH_CONFIDENCE_STEP * matches)

def _collect_text(entries: List[Dict[str, Any]]) -> str:
    """Flattens definitions, examples, synonyms and part of speech of every meaning."""
    parts: List[str] = []
    for entry in entries:
        for meaning in entry.get("meanings") or []:
            if not isinstance(meaning, dict):
                continue
            parts.append(str(meaning.get("partOfSpeech") or ""))
            parts.extend(str(s) for s in meaning.get("synonyms") or [])
            for definition in meaning.get("definitions") or []:
                if not isinstance(definition, dict):
                    continue
                parts.append(str(definition.get("definition") or ""))
                parts.append(str(definition.get("example") or ""))
                parts.extend(str(s) for s in definition.get("synonyms") or [])
    return " ".join(p for p in parts if p).lower()

def count_keyword_matches(text: str, keywords: Iterable[str]) -> int:
    """Counts keywords that start a word in `text` ("animals" matches "animal", "pineapple" does not match "apple")."""
    return sum(1 for kw in keywords if re.search(r"\b" + re.escape(kw.lower()), text))

class DictionaryValidator:
    """
    Looks the word up in a public dictionary (dictionaryapi.dev) and scans its
    definitions for category keywords.
    """

    source_name = "web-dictionary"

    def __init__(
        self,
        base_url: str = settings.DICTIONARY_API_URL,
        language: str = settings.DICTIONARY_LANGUAGE,
        timeout_seconds: float = settings.DICTIONARY_TIMEOUT_SECONDS,
        enabled: bool = settings.DICTIONARY_VALIDATION_ENABLED,
        keywords: Dict[str, Iterable[str]] | None = None,
        http_client: httpx.Client | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.language = language
        self.timeout_seconds = timeout_seconds
        self.enabled = enabled
        self.keywords = {k: frozenset(v) for k, v in (CATEGORY_KEYWORDS if keywords is None else keywords).items()}
        self._http_client = http_client

    def is_available(self) -> bool:
        return self.enabled

    def _entry_url(self, word: str) -> str:
        return f"{self.base_url}/entries/{self.language}/{quote(word, safe='')}"

    def _get(self, url: str) -> httpx.Response:
        if self._http_client is not None:
            return self._http_client.get(url, timeout=self.timeout_seconds)
        with httpx.Client(timeout=self.timeout_seconds) as client:
            return client.get(url)

    def _uncertain(self, details: str) -> ValidationResult:
        return ValidationResult(status=ValidationStatus.UNCERTAIN, confidence=0.5, source=self.source_name, details=details)

    def validate(self, word: str, category: CategoryPublic) -> ValidationResult:
        normalized = normalize(word)
        if not normalized:
            return ValidationResult(status=ValidationStatus.UNCERTAIN, source=self.source_name, details="Empty word")

        try:
            response = self._get(self._entry_url(normalized))
        except httpx.TimeoutException:
            logger.warning(f"Dictionary lookup timed out for '{normalized}'")
            return self._uncertain(f"Dictionary API timed out after {self.timeout_seconds}s")
        except httpx.HTTPError as e:
            logger.warning(f"Dictionary lookup failed for '{normalized}': {e}")
            return self._uncertain(f"Dictionary API error: {e}")

        if response.status_code == 404:
            return ValidationResult(
                status=ValidationStatus.INVALID,
                source=self.source_name,
                details=f"Word '{normalized}' not found in dictionary",
            )
        if not response.is_success:
            return self._uncertain(f"Dictionary API returned status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            return self._uncertain(f"Response parsing error: {e}")

        entries = payload if isinstance(payload, list) else [payload]
        entries = [e for e in entries if isinstance(e, dict) and "word" in e and "meanings" in e]
        if not entries:
            return ValidationResult(
                status=ValidationStatus.INVALID,
                source=self.source_name,
                details="Word not recognized by dictionary API",
            )

        category_keywords = self.keywords.get(category.name)
        if not category_keywords:
            return ValidationResult(
                status=ValidationStatus.UNCERTAIN,
                confidence=0.6,
                source=self.source_name,
                details=f"Dictionary check not implemented for {category.display_name}",
            )

        matches = count_keyword_matches(_collect_text(entries), category_keywords)
        if matches > 0:
            return ValidationResult(
                status=ValidationStatus.VALID,
                confidence=match_confidence(matches),
                source=self.source_name,
                details=f"Word '{normalized}' matches {category.display_name} ({matches} keyword matches)",
            )
        return ValidationResult(
            status=ValidationStatus.INVALID,
            source=self.source_name,
            details=f"Word '{normalized}' exists but doesn't match {category.display_name}",
        )
