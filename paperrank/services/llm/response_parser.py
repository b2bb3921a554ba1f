"""Response Parser Module

Parses batch scoring responses from the LLM:
- Strips markdown code fences and surrounding prose
- Locates the JSON array
- Validates entries, dropping malformed ones
- Accepts both the full format and the legacy single-score format
"""

import json
import math
import re
from typing import Any, Dict, List, Optional
import structlog

from paperrank.models.results import AIScore
from paperrank.utils.exceptions import JSONParseError
from paperrank.utils.scores import clamp_score

logger = structlog.get_logger()

_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


class ResponseParser:
    """Parses LLM score arrays into AIScore entries.

    Full format: ``{"index": 0, "relevance": 7, "discovery": 5, "reason": "..."}``
    Legacy format: ``{"i": 0, "s": 7, "r": "..."}`` (discovery = relevance)
    """

    def __init__(self, reason_chars: int = 80):
        """Initialize response parser.

        Args:
            reason_chars: Reasons are truncated to this many characters.
        """
        self.reason_chars = reason_chars

    def parse(self, text: str, expected_count: int) -> List[AIScore]:
        """Parse a batch response.

        Args:
            text: Raw response text
            expected_count: Number of papers in the batch; indices outside
                [0, expected_count) are dropped

        Returns:
            Valid score entries. Duplicate indices keep the last entry.

        Raises:
            JSONParseError: If no JSON array can be parsed from the text
        """
        content = self._clean_json_content(text)
        data = self._parse_json(content)

        scores: Dict[int, AIScore] = {}
        dropped = 0
        for item in data:
            score = self._parse_item(item, expected_count)
            if score is None:
                dropped += 1
                continue
            scores[score.index] = score

        logger.debug(
            "rerank_response_parsed",
            entries=len(data),
            valid=len(scores),
            dropped=dropped,
        )

        return [scores[i] for i in sorted(scores)]

    def _clean_json_content(self, content: str) -> str:
        """Strip markdown code fences; prose is left for the array decoder.

        Args:
            content: Raw content string

        Returns:
            Cleaned content string
        """
        content = (content or "").strip()

        fence = _FENCE.search(content)
        if fence:
            content = fence.group(1).strip()

        return content

    def _decode_array(self, content: str) -> Optional[List[Any]]:
        """First JSON array of objects in the text, ignoring anything after it.

        Each ``[`` is tried in turn so bracketed prose around the array
        (``scores in [1, 10]``) does not hide it. Falls back to the first
        array of any kind.
        """
        decoder = json.JSONDecoder()
        first: Optional[List[Any]] = None
        start = content.find("[")
        while start != -1:
            try:
                data, _ = decoder.raw_decode(content, start)
            except json.JSONDecodeError:
                data = None
            if isinstance(data, list):
                if any(isinstance(item, dict) for item in data):
                    return data
                if first is None:
                    first = data
            start = content.find("[", start + 1)
        return first

    def _parse_json(self, content: str) -> List[Any]:
        """Parse JSON content into a list.

        Args:
            content: Cleaned content, possibly with prose around the array

        Returns:
            Parsed list

        Raises:
            JSONParseError: If JSON is invalid or not an array
        """
        array = self._decode_array(content)
        if array is not None:
            return array

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(
                "rerank_response_invalid_json",
                error=str(e),
                preview=content[:200],
            )
            raise JSONParseError(f"Invalid JSON in scoring response: {e}") from e

        if not isinstance(data, list):
            raise JSONParseError(
                f"Expected a JSON array, got {type(data).__name__}"
            )

        return data

    def _parse_item(self, item: Any, expected_count: int) -> Optional[AIScore]:
        """Validate one array entry.

        Args:
            item: Decoded JSON value
            expected_count: Batch size

        Returns:
            AIScore, or None if the entry is malformed
        """
        if not isinstance(item, dict):
            return None

        if "index" in item:
            index = item.get("index")
            relevance = item.get("relevance")
            discovery = item.get("discovery", relevance)
            reason = item.get("reason")
        else:
            index = item.get("i")
            relevance = item.get("s")
            discovery = relevance
            reason = item.get("r")

        if not isinstance(index, int) or isinstance(index, bool):
            return None
        if not 0 <= index < expected_count:
            return None
        if not _is_number(relevance):
            return None
        if not _is_number(discovery):
            discovery = relevance

        return AIScore(
            index=index,
            relevance=clamp_score(float(relevance)),
            discovery=clamp_score(float(discovery)),
            reason=reason[: self.reason_chars] if isinstance(reason, str) else "",
        )
