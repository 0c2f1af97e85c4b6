"""Turn raw model output into a RepoSummary.

The model is asked for ``{"summary": str, "coolFacts": [str]}`` but replies
are not trusted: fences get stripped, unparseable text becomes the summary,
and a wrong shape is repaired field by field.
"""

import json
import re
from typing import Any

from loguru import logger

from keydash.modules.summarizer.domain.entities import RepoSummary

_LEADING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```\s*$")


def strip_code_fence(raw_output: str) -> str:
    cleaned = raw_output.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned)
    cleaned = _TRAILING_FENCE.sub("", cleaned)
    return cleaned.strip()


def parse_summary_output(raw_output: str) -> RepoSummary:
    """Parse model output, never raising."""
    cleaned = strip_code_fence(raw_output)

    try:
        data: Any = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"Summary output is not JSON, using raw text: {e}")
        return RepoSummary(summary=cleaned, cool_facts=[])

    if not isinstance(data, dict):
        logger.warning(f"Summary output is {type(data).__name__}, using raw text")
        return RepoSummary(summary=cleaned, cool_facts=[])

    summary = data.get("summary")
    if not isinstance(summary, str):
        logger.warning("Summary output has no string summary, blanking it")
        summary = ""

    facts = data.get("coolFacts")
    if not isinstance(facts, list):
        if facts is not None:
            logger.warning("Summary output coolFacts is not a list, dropping it")
        facts = []

    return RepoSummary(
        summary=summary,
        cool_facts=[fact for fact in facts if isinstance(fact, str)],
    )
