"""
Outbound request translation.

Turns a caller's chat history (or an analysis request) into the
chat-completion payload sent to the active vendor. The caller never gets to
set the system prompt: it is always the fixed brand prompt below.
"""
import logging
from typing import Optional

from .provider import Provider

logger = logging.getLogger(__name__)


MAX_TOKENS = 2048
DEFAULT_TEMPERATURE = 0.7
ANALYSIS_TEMPERATURE = 0.5

CHAT_SYSTEM_PROMPT = """You are CroweCode Intelligence, a proprietary AI system developed exclusively for the CroweCode platform.
You are NOT Claude, GPT, Grok, or any other publicly known AI.
You are a custom neural architecture designed specifically for code development.
Never mention or reference external AI providers or models.
Always refer to yourself as CroweCode Intelligence or CroweCode AI.
You have advanced capabilities including 256K context, reasoning, and multi-step execution."""

ANALYSIS_SYSTEM_PROMPT = (
    "You are CroweCode Intelligence, an advanced proprietary AI system. "
    "Never mention external AI providers. You are a custom-built neural network "
    "designed specifically for code analysis and generation."
)

ANALYSIS_PROMPT_TEMPLATE = """Analyze this {language} code and provide suggestions:

File: {file_path}
Code:
```{language}
{code}
```

Please provide:
1. A code completion if the code appears incomplete
2. Refactoring suggestions for better readability
3. Any bug fixes needed
4. Performance optimizations
5. Documentation suggestions

Format the response as a single JSON object with these fields:
- completion: suggested code completion
- refactoring: refactored version of the code
- fixes: array of {{title, description, code, explanation, confidence}}
- optimization: optimized version
- documentation: suggested documentation/comments"""


def build_chat_messages(messages: list[dict]) -> list[dict]:
    """
    Replace any caller system messages with the brand system prompt.

    Caller system messages are dropped, not merged. Other roles pass through
    as given, unknown ones included.
    """
    conversation = [m for m in messages if m.get("role") != "system"]
    dropped = len(messages) - len(conversation)
    if dropped:
        logger.debug("Dropped %d caller system message(s)", dropped)

    return [{"role": "system", "content": CHAT_SYSTEM_PROMPT}, *conversation]


def build_analysis_prompt(code: str, language: Optional[str], file_path: Optional[str]) -> str:
    return ANALYSIS_PROMPT_TEMPLATE.format(
        language=language or "",
        file_path=file_path or "",
        code=code,
    )


def build_analysis_messages(code: str, language: Optional[str], file_path: Optional[str]) -> list[dict]:
    return [
        {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
        {"role": "user", "content": build_analysis_prompt(code, language, file_path)},
    ]


def build_chat_payload(
    provider: Provider,
    messages: list[dict],
    temperature: Optional[float] = None,
) -> dict:
    """Payload for a chat-mode request."""
    return {
        "model": provider.model,
        "messages": build_chat_messages(messages),
        "temperature": temperature if temperature is not None else DEFAULT_TEMPERATURE,
        "max_tokens": MAX_TOKENS,
    }


def build_analysis_payload(
    provider: Provider,
    code: str,
    language: Optional[str] = None,
    file_path: Optional[str] = None,
) -> dict:
    """Payload for an analysis-mode request. Temperature is always pinned."""
    return {
        "model": provider.model,
        "messages": build_analysis_messages(code, language, file_path),
        "temperature": ANALYSIS_TEMPERATURE,
        "max_tokens": MAX_TOKENS,
    }
