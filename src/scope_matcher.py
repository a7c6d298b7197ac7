"""
Scope Matcher - Glob Authorization for File Paths
=================================================

Decides whether a path falls inside an intent's owned scope.

Matching rules:
- Separators are normalized to "/" and "." / ".." segments collapsed
  before matching
- A path that still climbs above its starting point ("../x") is never
  in a non-empty scope
- "*" and "?" never cross a "/" boundary
- "**" as a whole segment matches zero or more directories
- "{a,b}" alternatives are expanded
- A pattern without "/" matches the base name alone ("*.ts" covers
  "src/deep/x.ts")
- Dotfiles are matched like any other name
- Empty scope = unrestricted; otherwise the first matching pattern wins
"""

import fnmatch
import posixpath
import re
from typing import Iterable, List, Optional

_BRACE_PATTERN = re.compile(r"\{([^{}]*)\}")

PARENT_SEGMENT = ".."


def normalize_path(path: str) -> str:
    """Fold separators to "/", collapse repeats and resolve "." / ".." segments."""
    normalized = path.replace("\\", "/")
    normalized = re.sub(r"/{2,}", "/", normalized)
    if not normalized:
        return normalized
    return posixpath.normpath(normalized)


def escapes_root(path: str) -> bool:
    """True if the normalized path climbs above where it starts."""
    return PARENT_SEGMENT in normalize_path(path).split("/")


def expand_braces(pattern: str) -> List[str]:
    """Expand "{a,b}" alternatives, innermost group first."""
    match = _BRACE_PATTERN.search(pattern)
    if match is None:
        return [pattern]
    options = match.group(1).split(",")
    if len(options) < 2:
        return [pattern]
    expanded = []
    for option in options:
        candidate = pattern[:match.start()] + option + pattern[match.end():]
        expanded.extend(expand_braces(candidate))
    return expanded


def _match_segments(path_parts: List[str], pattern_parts: List[str]) -> bool:
    """Match path components against pattern components with ** support."""
    if not pattern_parts:
        return not path_parts

    if pattern_parts[0] == "**":
        # ** can match zero components...
        if _match_segments(path_parts, pattern_parts[1:]):
            return True
        # ...or swallow one and try again
        if path_parts:
            return _match_segments(path_parts[1:], pattern_parts)
        return False

    if not path_parts:
        return False

    if fnmatch.fnmatchcase(path_parts[0], pattern_parts[0]):
        return _match_segments(path_parts[1:], pattern_parts[1:])

    return False


def match_pattern(path: str, pattern: str) -> bool:
    """Match one normalized path against one glob pattern."""
    norm_path = normalize_path(path)
    if escapes_root(norm_path):
        return False
    for candidate in expand_braces(normalize_path(pattern)):
        if not candidate:
            continue
        if "/" not in candidate:
            # Base-name match for slash-free patterns
            base_name = norm_path.rsplit("/", 1)[-1]
            if fnmatch.fnmatchcase(base_name, candidate):
                return True
            continue

        absolute = candidate.startswith("/")
        if absolute != norm_path.startswith("/"):
            continue
        path_parts = [p for p in norm_path.split("/") if p]
        pattern_parts = [p for p in candidate.split("/") if p]
        if _match_segments(path_parts, pattern_parts):
            return True
    return False


def find_matching_pattern(path: str, patterns: Optional[Iterable[str]]) -> Optional[str]:
    """First pattern that covers the path, or None."""
    for pattern in patterns or ():
        if isinstance(pattern, str) and match_pattern(path, pattern):
            return pattern
    return None


def is_in_scope(path: str, patterns: Optional[Iterable[str]]) -> bool:
    """
    True if `path` is covered by any pattern.

    None or an empty list means the intent declared no scope, which is
    unrestricted.
    """
    pattern_list = list(patterns or [])
    if not pattern_list:
        return True
    return find_matching_pattern(path, pattern_list) is not None
