# app/services/semantic_client.py
import json
import logging
import math
from enum import Enum
from typing import Any

import google.generativeai as genai
import httpx
from pydantic import BaseModel, ValidationError, field_validator

from app.core.config import Settings, settings

logger = logging.getLogger("app.services.semantic_client")

GEMINI_PLACEHOLDER_KEY = "YOUR_GEMINI_API_KEY_HERE"

GEMINI_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "is_valid": {"type": "BOOLEAN", "description": "Whether the word belongs to the category."},
        "confidence": {"type": "NUMBER", "description": "How sure the judge is, from 0.0 to 1.0."},
        "reason": {"type": "STRING", "description": "A brief explanation for the decision."}
    },
    "required": ["is_valid", "confidence", "reason"]
}

class SemanticErrorType(str, Enum):
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    API_ERROR = "API_ERROR"
    PARSING_ERROR = "PARSING_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

class SemanticClientError(Exception):
    def __init__(self, message: str, client_name: str, error_type: SemanticErrorType = SemanticErrorType.UNKNOWN_ERROR):
        super().__init__(message)
        self.client_name = client_name
        self.error_type = error_type

    def __str__(self):
        return f"[{self.client_name}] {self.error_type.value}: {self.args[0]}"

class SemanticVerdict(BaseModel):
    valid: bool
    confidence: float = 1.0 # Deterministic backends only answer true/false
    reasoning: str = ""

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, value) -> float:
        if value is None:
            return 1.0
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"confidence must be a finite number, got {value}")
        return max(0.0, min(1.0, value))

    @field_validator("reasoning", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        return "" if value is None else value

def parse_verdict(payload: Any, client_name: str) -> SemanticVerdict:
    """
    Accepts {"valid": bool} or {"valid": bool, "confidence": float, "reasoning": str},
    optionally wrapped in a one-element list as some webhook runners return.
    """
    if isinstance(payload, list) and len(payload) == 1:
        payload = payload[0]
    if not isinstance(payload, dict) or not isinstance(payload.get("valid"), bool):
        raise SemanticClientError(
            f"Unexpected response shape: {str(payload)[:200]}", client_name, SemanticErrorType.PARSING_ERROR
        )
    try:
        return SemanticVerdict.model_validate(payload)
    except (ValidationError, ValueError, TypeError) as e:
        raise SemanticClientError(f"Invalid verdict fields: {e}", client_name, SemanticErrorType.PARSING_ERROR) from e

class WebhookSemanticClient:
    """Posts {"chatInput": prompt} to a chat webhook (n8n style) and reads back a verdict."""

    client_name = "webhook"

    def __init__(self, url: str, timeout_seconds: float = settings.SEMANTIC_TIMEOUT_SECONDS, http_client: httpx.Client | None = None):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._http_client = http_client

    def is_healthy(self) -> bool:
        return bool(self.url and self.url.strip())

    def ask(self, prompt: str) -> SemanticVerdict:
        try:
            if self._http_client is not None:
                response = self._http_client.post(self.url, json={"chatInput": prompt}, timeout=self.timeout_seconds)
            else:
                with httpx.Client(timeout=self.timeout_seconds) as client:
                    response = client.post(self.url, json={"chatInput": prompt})
        except httpx.TimeoutException as e:
            raise SemanticClientError(f"Request timed out after {self.timeout_seconds}s", self.client_name, SemanticErrorType.TIMEOUT) from e
        except httpx.HTTPError as e:
            raise SemanticClientError(f"Network error: {e}", self.client_name, SemanticErrorType.NETWORK_ERROR) from e

        if response.status_code in (401, 403):
            raise SemanticClientError(f"Webhook rejected credentials (status {response.status_code})", self.client_name, SemanticErrorType.AUTHENTICATION_ERROR)
        if response.status_code == 429:
            raise SemanticClientError("Webhook rate limit exceeded", self.client_name, SemanticErrorType.RATE_LIMIT_EXCEEDED)
        if not response.is_success:
            raise SemanticClientError(
                f"Webhook returned status {response.status_code}, body: {response.text[:200]}",
                self.client_name,
                SemanticErrorType.API_ERROR,
            )

        try:
            payload = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise SemanticClientError(f"Response is not JSON: {e}", self.client_name, SemanticErrorType.PARSING_ERROR) from e

        verdict = parse_verdict(payload, self.client_name)
        if not verdict.reasoning:
            verdict = verdict.model_copy(update={"reasoning": f"Webhook verdict: {'valid' if verdict.valid else 'invalid'}"})
        return verdict

class GeminiSemanticClient:
    client_name = "gemini"

    def __init__(self, api_key: str, model_name: str = settings.GEMINI_MODEL):
        self.api_key = api_key
        self.model_name = model_name
        self._model = None

    def is_healthy(self) -> bool:
        return bool(self.api_key) and self.api_key != GEMINI_PLACEHOLDER_KEY

    def _get_model(self):
        if self._model is None:
            try:
                genai.configure(api_key=self.api_key)
                self._model = genai.GenerativeModel(self.model_name)
            except Exception as e:
                raise SemanticClientError(f"Gemini client configuration error: {e}", self.client_name, SemanticErrorType.AUTHENTICATION_ERROR) from e
        return self._model

    def ask(self, prompt: str) -> SemanticVerdict:
        if not self.is_healthy():
            raise SemanticClientError("GEMINI_API_KEY is not configured", self.client_name, SemanticErrorType.AUTHENTICATION_ERROR)

        model = self._get_model()
        gemini_prompt_text = f"""
You are the judge of a "Petit Bac" word game. Answer the following question about category membership.
Don't be too harsh: common spellings and well-known proper nouns are acceptable.

Question: {prompt}

Please provide your judgment based on these fields:
- "is_valid": (boolean) True if the word belongs to the category.
- "confidence": (number) From 0.0 (guessing) to 1.0 (certain).
- "reason": (string) A brief explanation for your decision.
"""
        generation_config = {
            "response_mime_type": "application/json",
            "response_schema": GEMINI_RESPONSE_SCHEMA
        }
        try:
            response = model.generate_content(gemini_prompt_text, generation_config=generation_config)
        except Exception as e:
            raise SemanticClientError(f"Gemini call failed: {e}", self.client_name, SemanticErrorType.API_ERROR) from e

        try:
            judgment = json.loads(response.text)
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            raise SemanticClientError(f"JSON decode error: {e}", self.client_name, SemanticErrorType.PARSING_ERROR) from e

        if not isinstance(judgment, dict):
            raise SemanticClientError(f"Unexpected response shape: {judgment!r}", self.client_name, SemanticErrorType.PARSING_ERROR)

        return parse_verdict(
            {
                "valid": judgment.get("is_valid"),
                "confidence": judgment.get("confidence"),
                "reasoning": judgment.get("reason"),
            },
            self.client_name,
        )

def build_semantic_client(config: Settings = settings):
    """Returns the configured client, or None when SEMANTIC_BACKEND is "none"."""
    if config.SEMANTIC_BACKEND == "webhook":
        return WebhookSemanticClient(config.SEMANTIC_WEBHOOK_URL, config.SEMANTIC_TIMEOUT_SECONDS)
    if config.SEMANTIC_BACKEND == "gemini":
        return GeminiSemanticClient(config.GEMINI_API_KEY, config.GEMINI_MODEL)
    logger.info("Semantic validation disabled (SEMANTIC_BACKEND=none)")
    return None
