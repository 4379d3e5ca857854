"""
Narration: Arabic explanations for computed results.

Uses Google Gemini to turn a flat record of inputs and computed values into
prose. Narration never feeds back into the numbers. Callers go through
narrate_or_fallback, which makes a single attempt and substitutes a
deterministic template when the model is unavailable.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT_MS = 30000

SYSTEM_INSTRUCTIONS = (
    "أنت مهندس خبير في تصميم أنظمة الطاقة الشمسية في الأردن. "
    "اشرح النتائج التالية باللغة العربية بشكل واضح ومختصر. "
    "لا تغيّر أي رقم ولا تخترع قيماً غير موجودة في البيانات."
)


class NarrationError(Exception):
    """The narration service could not produce text."""


class Narrator(Protocol):
    def narrate(self, context: Dict[str, Any], instructions: str = "") -> str:
        ...


@dataclass(frozen=True)
class Narration:
    text: str
    source: str  # "ai" | "template"

    @property
    def is_fallback(self) -> bool:
        return self.source == "template"


def build_prompt(context: Dict[str, Any], instructions: str = "") -> str:
    data = json.dumps(context, ensure_ascii=False, indent=2, default=str)
    parts = [SYSTEM_INSTRUCTIONS]
    if instructions:
        parts.append(instructions)
    parts.append(f"البيانات:\n{data}")
    return "\n\n".join(parts)


class GeminiNarrator:
    """Narrates results with Google Gemini."""

    def __init__(self, model: str | None = None, timeout_ms: int | None = None):
        """
        Model priority:
        1) explicit `model` argument
        2) env `GEMINI_MODEL`
        3) gemini-2.5-flash
        """
        self.model = model or os.getenv("GEMINI_MODEL") or DEFAULT_MODEL
        if timeout_ms is None:
            timeout_ms = int(os.getenv("SHAMS_NARRATION_TIMEOUT_MS", DEFAULT_TIMEOUT_MS))
        self.timeout_ms = timeout_ms
        self._client = None
        logger.info(f"GeminiNarrator initialized with model: {self.model}")

    def _get_client(self):
        if self._client is None:
            api_key = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")
            if not api_key:
                raise NarrationError("No GOOGLE_API_KEY found in environment")

            from google import genai
            from google.genai import types

            self._client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=self.timeout_ms),
            )
        return self._client

    def narrate(self, context: Dict[str, Any], instructions: str = "") -> str:
        prompt = build_prompt(context, instructions)

        try:
            client = self._get_client()
            logger.info(f"Calling Gemini model: {self.model}")
            response = client.models.generate_content(
                model=self.model,
                contents=prompt,
            )
        except NarrationError:
            raise
        except Exception as e:
            logger.error(f"Gemini API error (model={self.model}): {e}")
            raise NarrationError(str(e)) from e

        text = (response.text or "").strip()
        if not text:
            raise NarrationError(f"Empty response from {self.model}")
        logger.info(f"Gemini response length: {len(text)} chars")
        return text


def narrate_or_fallback(
    narrator: Optional[Narrator],
    context: Dict[str, Any],
    fallback: str,
    instructions: str = "",
) -> Narration:
    """One narration attempt; the template text on any narration failure."""
    if narrator is None:
        return Narration(text=fallback, source="template")

    try:
        text = narrator.narrate(context, instructions)
    except Exception as e:
        logger.warning(f"Narration failed, using template: {e}")
        return Narration(text=fallback, source="template")

    return Narration(text=text, source="ai")
