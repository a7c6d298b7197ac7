"""
Intent Map - Spatial Index
==========================

`.orchestration/intent_map.md` is a Markdown table mapping files back to
the intent that last touched them. It is for humans; the trace log is
the machine record.

Append-only: rows are never rewritten. Only the last row of the table
is compared; if it already names the same (intent, name, path) the new
row is suppressed, otherwise it is appended. A different row written in
between means the pair shows up twice.

Known limitation: the check-then-append has no lock. It is safe only
because tool calls are serialized within one agent session. Concurrent
writers from separate sessions on the same workspace can lose rows.
"""

from pathlib import Path
from typing import List, NamedTuple, Optional

from orchestration_config import PathLike, get_intent_map_path
from time_utils import utc_now_iso

INTENT_MAP_HEADER = (
    "# Intent Map\n"
    "\n"
    "Maps business intents to physical files modified by the AI agent.\n"
    "\n"
    "| Intent ID | Intent Name | File Path | Last Modified |\n"
    "|-----------|-------------|-----------|---------------|\n"
)


class IntentMapRow(NamedTuple):
    intent_id: str
    intent_name: str
    file_path: str
    last_modified: str

    def render(self) -> str:
        return (
            f"| {_cell(self.intent_id)} | {_cell(self.intent_name)} "
            f"| `{_cell(self.file_path)}` | {self.last_modified} |\n"
        )

    def same_target(self, other: "IntentMapRow") -> bool:
        return (
            self.intent_id == other.intent_id
            and self.intent_name == other.intent_name
            and self.file_path == other.file_path
        )


def _cell(value: str) -> str:
    """Keep a value from breaking the table layout."""
    return value.replace("\n", " ").replace("|", "\\|")


def _uncell(value: str) -> str:
    return value.replace("\\|", "|")


def parse_row(line: str) -> Optional[IntentMapRow]:
    """Parse one table row; header, separator and prose lines yield None."""
    line = line.strip()
    if not line.startswith("|") or not line.endswith("|"):
        return None
    # Split on unescaped pipes only
    cells = []
    current = ""
    escaped = False
    for ch in line[1:-1]:
        if ch == "|" and not escaped:
            cells.append(current.strip())
            current = ""
        else:
            current += ch
        escaped = ch == "\\" and not escaped
    cells.append(current.strip())

    if len(cells) != 4:
        return None
    intent_id, intent_name, file_path, last_modified = cells
    if intent_id == "Intent ID" or set(intent_id) <= {"-"}:
        return None
    if file_path.startswith("`") and file_path.endswith("`") and len(file_path) >= 2:
        file_path = file_path[1:-1]
    return IntentMapRow(_uncell(intent_id), _uncell(intent_name), _uncell(file_path), last_modified)


def read_rows(workspace_root: PathLike) -> List[IntentMapRow]:
    """All data rows, in file order. A missing map has no rows."""
    map_path = get_intent_map_path(workspace_root)
    try:
        text = map_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    rows = []
    for line in text.splitlines():
        row = parse_row(line)
        if row is not None:
            rows.append(row)
    return rows


def upsert_row(
    workspace_root: PathLike,
    intent_id: str,
    intent_name: str,
    file_path: str,
    timestamp: Optional[str] = None,
) -> bool:
    """
    Record that `file_path` was touched under `intent_id`.

    Returns True if a new row was appended, False if the last row
    already names the same target and the file was left as is. Raises
    OSError on write failure; the caller decides whether that matters.
    """
    map_path: Path = get_intent_map_path(workspace_root)
    new_row = IntentMapRow(intent_id, intent_name, file_path, timestamp or utc_now_iso())

    try:
        existing = map_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        existing = INTENT_MAP_HEADER

    lines = existing.splitlines()
    last_row = parse_row(lines[-1]) if lines else None
    if last_row is not None and last_row.same_target(new_row):
        return False

    if existing and not existing.endswith("\n"):
        existing += "\n"

    map_path.parent.mkdir(parents=True, exist_ok=True)
    map_path.write_text(existing + new_row.render(), encoding="utf-8")
    return True
