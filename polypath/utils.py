import re
from typing import Optional

FALLBACK_THEME = "basic everyday vocabulary"

_FENCE_RE = re.compile(r"^```[A-Za-z0-9_-]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)
_OPEN_FENCE_RE = re.compile(r"^```[A-Za-z0-9_-]*")


def strip_code_fences(text: str) -> str:
    """Trim the reply and drop a surrounding ```json ... ``` fence if present."""
    s = (text or "").strip()
    m = _FENCE_RE.match(s)
    if m:
        return m.group(1).strip()
    # Unterminated fence: drop the opening line only
    if s.startswith("```"):
        return _OPEN_FENCE_RE.sub("", s, count=1).strip()
    return s


def resolve_theme(theme: Optional[str]) -> str:
    """Return the trimmed theme, or the generic fallback when it is blank."""
    if isinstance(theme, str) and theme.strip():
        return " ".join(theme.split())
    return FALLBACK_THEME


def same_language(l1: str, tl: str) -> bool:
    return (l1 or "").strip().lower() == (tl or "").strip().lower()


def truncate_for_log(s: str, max_chars: int = 2000) -> str:
    s = s or ""
    if len(s) <= max_chars:
        return s
    return s[:max_chars] + f"... [{len(s) - max_chars} more chars]"
