"""Thin async wrapper around the Gemini generative model."""

import json
import logging
import os

import google.generativeai as genai

from learnflow.errors import ExternalServiceError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-1.5-flash"


class GeminiClient:

    def __init__(self, api_key: str | None = None, model_name: str | None = None):
        self._api_key = api_key or os.getenv("GEMINI_API_KEY", "")
        self._model_name = model_name or os.getenv("GEMINI_MODEL", DEFAULT_MODEL)
        self.model = None

    def _ensure_model(self):
        if not self.model:
            if not self._api_key:
                raise ExternalServiceError(
                    "Gemini API key not configured. Please set GEMINI_API_KEY environment variable."
                )
            genai.configure(api_key=self._api_key)
            self.model = genai.GenerativeModel(self._model_name)

    async def generate_text(self, prompt: str) -> str:
        self._ensure_model()
        logger.debug("Sending %d character prompt to %s", len(prompt), self._model_name)
        response = await self.model.generate_content_async(prompt)
        return response.text or ""


def extract_json(text: str) -> dict:
    """Parse a JSON object from model output, ignoring surrounding prose."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Models often wrap the object in markdown fences or commentary
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end <= start:
            raise ValueError("No valid JSON found in response")
        data = json.loads(text[start : end + 1])
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object in response")
    return data
