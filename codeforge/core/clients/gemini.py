"""
Gemini client — one blocking generateContent call per turn.

Transport is plain ``urllib.request``. Authentication is the API key
query parameter. Errors come back as GeminiApiError with the status
and body the API returned.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from pydantic import ValidationError

from codeforge.core.clients.prompts import chat_prompt, codebase_prompt
from codeforge.core.config.loader import Settings
from codeforge.core.models.response import GeminiApiResponse

logger = logging.getLogger(__name__)

CODE_EXECUTION_TOOL = {"code_execution": {}}


class GeminiApiError(Exception):
    """Raised when the Gemini API call fails or returns garbage."""


class GeminiClient:
    """Thin client over the generateContent endpoint.

    Args:
        settings: Model, endpoint, key and timeout.
    """

    def __init__(self, settings: Settings):
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings

    # ── Modes ───────────────────────────────────────────────────

    def chat(self, query: str, system: str, feedback: str = "") -> GeminiApiResponse:
        """Chat mode: ask for a JSON action document."""
        body = {"contents": [{"parts": [{"text": chat_prompt(query, system, feedback)}]}]}
        logger.info("Sending chat request to Gemini API...")
        return self._generate(body)

    def execute(self, query: str) -> GeminiApiResponse:
        """Code-execution mode: the model may run code server-side."""
        body = {
            "tools": [CODE_EXECUTION_TOOL],
            "contents": [{"role": "user", "parts": [{"text": query}]}],
        }
        logger.info("Sending code execution request to Gemini API...")
        return self._generate(body)

    def create_codebase(self, description: str) -> GeminiApiResponse:
        """Generation mode: ask for a markdown document of files."""
        body = {
            "tools": [CODE_EXECUTION_TOOL],
            "contents": [{"role": "user", "parts": [{"text": codebase_prompt(description)}]}],
        }
        logger.info("Sending request to Gemini API to create codebase...")
        return self._generate(body)

    # ── Transport ───────────────────────────────────────────────

    def _url(self) -> str:
        endpoint = self._settings.endpoint
        separator = "&" if "?" in endpoint else "?"
        query = urllib.parse.urlencode({"key": self._settings.require_api_key()})
        return f"{endpoint}{separator}{query}"

    def _generate(self, body: dict[str, Any]) -> GeminiApiResponse:
        """POST a request body and parse the response envelope.

        Raises:
            ConfigError: No API key configured.
            GeminiApiError: Network failure, non-2xx status, or a body
                that isn't a generateContent response.
        """
        req = urllib.request.Request(
            self._url(),
            data=json.dumps(body).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )

        try:
            with urllib.request.urlopen(req, timeout=self._settings.request_timeout) as resp:
                status = resp.status
                text = resp.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as e:
            error_body = e.read().decode("utf-8", errors="replace") if e.fp else ""
            logger.error("API Error Response: %s", error_body)
            raise GeminiApiError(
                f"API request failed with status {e.code}: {error_body}"
            ) from e
        except urllib.error.URLError as e:
            raise GeminiApiError(f"Error communicating with Gemini API: {e.reason}") from e
        except OSError as e:
            raise GeminiApiError(f"Error communicating with Gemini API: {e}") from e

        logger.info("API Response Status: %s", status)

        try:
            return GeminiApiResponse.model_validate_json(text)
        except ValidationError as e:
            logger.error("Failed to parse API response: %s", e)
            logger.debug("Response text: %s", text)
            raise GeminiApiError(f"Failed to parse API response: {e}") from e
