from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _optional_float(name: str) -> float | None:
    value = os.getenv(name)
    return float(value) if value else None


@dataclass(frozen=True)
class LLMConfig:
    api_key: str = os.getenv("GEMINI_API_KEY", "")
    model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    temperature: float = float(os.getenv("GEMINI_TEMPERATURE", "0.4"))
    output_language: str = os.getenv("FOODGUIDE_OUTPUT_LANGUAGE", "English")
    result_count: int = 5
    # Seconds; None leaves latency bounds to the remote service.
    timeout: float | None = _optional_float("GEMINI_TIMEOUT")


DEFAULT_LLM_CONFIG = LLMConfig()
