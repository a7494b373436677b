"""Insight export: quiz outcome rendered as JSON or a plain-text report."""

from __future__ import annotations

import json
import math
from typing import Any, Iterable, Optional

from wordsheet.contracts import build_contract, utc_now_iso
from wordsheet.languages import language_by_code
from wordsheet.quiz import QuizSession

EXPORT_FORMATS = ("json", "txt")


def format_duration(milliseconds: float) -> str:
    if not math.isfinite(milliseconds) or milliseconds <= 0:
        return "0s"
    seconds = int(milliseconds // 1000)
    minutes, remaining = divmod(seconds, 60)
    parts: list[str] = []
    if minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{remaining}s")
    return " ".join(parts)


def build_insights(
    session: QuizSession,
    *,
    mother_language: Optional[str] = None,
    learning_languages: Iterable[str] = (),
) -> dict[str, Any]:
    return {
        "contract": build_contract("wordsheet.insights"),
        "generated_at": utc_now_iso(),
        "mother_language": language_by_code(mother_language).label if mother_language else "N/A",
        "learning_languages": [language_by_code(code).label for code in learning_languages],
        "total_words": len(session.entries),
        "accuracy": f"{session.accuracy}%",
        "duration": format_duration(session.duration_ms),
        "mistakes": [
            {"word": response.word.unknown, "translation": response.word.translation}
            for response in session.mistakes
        ],
    }


def render_insights_text(insights: dict[str, Any]) -> str:
    lines = [
        f"Mother language: {insights['mother_language']}",
        f"Learning languages: {', '.join(insights['learning_languages']) or 'None'}",
        f"Total words: {insights['total_words']}",
        f"Accuracy: {insights['accuracy']}",
        f"Duration: {insights['duration']}",
        "Words to review:",
    ]
    if insights["mistakes"]:
        for idx, mistake in enumerate(insights["mistakes"], start=1):
            lines.append(f"{idx}. {mistake['word']} → {mistake['translation']}")
    else:
        lines.append("None! Flawless run.")
    return "\n".join(lines)


def render_insights(insights: dict[str, Any], fmt: str = "json") -> str:
    if fmt == "json":
        return json.dumps(insights, indent=2, ensure_ascii=False)
    if fmt == "txt":
        return render_insights_text(insights)
    raise ValueError(f"Unsupported export format '{fmt}'. Supported: {', '.join(EXPORT_FORMATS)}")


def insights_filename(fmt: str) -> str:
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format '{fmt}'. Supported: {', '.join(EXPORT_FORMATS)}")
    return f"insights.{fmt}"
