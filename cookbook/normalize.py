from typing import Iterable, List, Optional

# Tags are shared across users, so one spelling maps to one row:
# trimmed and lower-cased, no other rewriting.


def normalize_tag(s: Optional[str]) -> str:
    if not s:
        return ""
    return s.strip().lower()


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Normalize a list of tag names.

    Empty results are dropped and duplicates collapsed, keeping the first
    occurrence's position.
    """
    out: List[str] = []
    seen = set()
    for t in tags or []:
        n = normalize_tag(t)
        if n and n not in seen:
            seen.add(n)
            out.append(n)
    return out


def parse_tag_filter(raw: Optional[str]) -> List[str]:
    """Split a comma-separated ``tags`` query value into normalized names."""
    if not raw:
        return []
    return normalize_tags(raw.split(","))
