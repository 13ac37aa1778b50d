import json
from typing import Any, Dict

from candidate_eval.utils.exceptions import ResponseFormatError

TRUNCATION_MARKER = "\n...(truncated)"


def truncate_text(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[:max_len] + TRUNCATION_MARKER


def extract_json_object(s: str) -> Dict[str, Any]:
    """Parse the JSON object embedded in free-form model output.

    Takes the span from the first "{" to the last "}", so prose before and
    after the object is ignored.
    """
    start = s.find("{")
    end = s.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise ResponseFormatError("Invalid response format")
    try:
        return json.loads(s[start:end + 1])
    except json.JSONDecodeError as e:
        raise ResponseFormatError(f"Failed to parse model response: {e.msg}", cause=e) from e
