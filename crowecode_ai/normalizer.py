"""
Vendor response normalization.

Vendors are asked to reply with JSON in analysis mode but can't be trusted to
do it, so analysis parsing is best-effort: anything that doesn't decode falls
back to returning the raw text as documentation.
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Literal

from .errors import MalformedEnvelopeError
from .models import AnalysisResponse, ChatMetadata, ChatResponse

logger = logging.getLogger(__name__)


CHAT_METADATA = ChatMetadata(
    model="CroweCode Neural Engine v4.0",
    provider="CroweCode™ Proprietary",
    capabilities="Advanced Reasoning + Multi-step Execution",
)

# Greedy: first "{" through last "}"
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def _reject_constant(name: str):
    # NaN and Infinity aren't JSON and can't be serialized back out
    raise ValueError(f"Non-standard JSON constant: {name}")


@dataclass
class AnalysisParse:
    """Result of parsing analysis content."""
    kind: Literal["parsed", "fallback"]
    result: dict[str, Any]

    @property
    def parsed(self) -> bool:
        return self.kind == "parsed"


def extract_content(envelope: Any) -> str:
    """
    Pull choices[0].message.content out of a vendor reply.

    Raises MalformedEnvelopeError if the path doesn't exist. A null content
    is treated as an empty reply.
    """
    try:
        content = envelope["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedEnvelopeError(f"Vendor reply missing choices[0].message.content: {e!r}") from e

    if content is None:
        return ""
    return content if isinstance(content, str) else str(content)


def normalize_chat(content: str) -> ChatResponse:
    """Chat-mode response body."""
    return ChatResponse(content=content, role="assistant", metadata=CHAT_METADATA)


def fallback_analysis(content: str) -> dict:
    return AnalysisResponse(documentation=content).model_dump()


def parse_analysis(content: str) -> AnalysisParse:
    """
    Find the first brace-delimited JSON object in `content` and decode it.

    A decoded object is returned as-is, without checking its fields.
    Anything else yields the raw-text fallback.
    """
    match = _JSON_OBJECT_RE.search(content)
    if match is None:
        logger.debug("No JSON object in analysis reply (len=%d)", len(content))
        return AnalysisParse(kind="fallback", result=fallback_analysis(content))

    try:
        data = json.loads(match.group(0), parse_constant=_reject_constant)
    except ValueError as e:
        logger.error("Failed to parse analysis response as JSON: %s", e)
        logger.debug("Raw analysis reply (first 500 chars): %s", content[:500])
        return AnalysisParse(kind="fallback", result=fallback_analysis(content))

    if not isinstance(data, dict):
        return AnalysisParse(kind="fallback", result=fallback_analysis(content))

    return AnalysisParse(kind="parsed", result=data)


def normalize_analysis(content: str) -> dict:
    """Analysis-mode response body."""
    return parse_analysis(content).result
