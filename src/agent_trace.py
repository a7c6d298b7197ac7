"""
Agent Trace - Post-Hook Audit Writer
====================================

The provenance record. One JSON line per allowed mutation, linking the
change to its intent, the acting model and session, and a content hash.

Design principles:
- APPEND-ONLY: entries are never rewritten or deleted here
- BEST-EFFORT: the tool call already ran; a failed write is logged and
  swallowed, never raised back into the runtime
- ONE LINE PER ENTRY: a crash mid-append loses at most the last partial
  line, which readers skip

Entry schema:

    {
      "id": "<uuid4>",
      "timestamp": "<ISO-8601 UTC>",
      "vcs": {"revision_id": "<git sha | no-git>"},
      "intent_id": "INT-001",
      "mutation_class": "INTENT_EVOLUTION",
      "files": [{
        "relative_path": "src/api/weather.py",
        "conversations": [{
          "url": "<session id>",
          "contributor": {"entity_type": "AI", "model_identifier": "..."},
          "ranges": [{"start_line": 1, "end_line": 42, "content_hash": "sha256:<hex>"}],
          "related": [{"type": "specification", "value": "INT-001"}]
        }]
      }]
    }

The range is always 1..line count of the new content. It is a coarse
proxy for "what changed", not a diff; downstream readers rely on this
form.
"""

import json
import threading
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from content_fingerprint import prefixed_digest
from gate_logger import log_debug, log_error, log_warn
from intent_map import upsert_row
from intent_store import resolve_intent
from invocation import InvocationContext
from orchestration_config import PathLike, get_trace_path, is_enabled
from revision_resolver import resolve_revision
from time_utils import utc_now_iso
from tool_catalog import MODEL_IDENTIFIER_PARAM, SESSION_ID_PARAM, modified_content_for

CONTRIBUTOR_ENTITY_TYPE = "AI"
UNKNOWN_MODEL = "unknown-model"
RELATED_SPECIFICATION = "specification"

# Thread lock for appends from the same process
_append_lock = threading.Lock()


# ============================================================
# TRACE SCHEMA
# ============================================================

@dataclass
class Contributor:
    entity_type: str = CONTRIBUTOR_ENTITY_TYPE
    model_identifier: str = UNKNOWN_MODEL


@dataclass
class ContentRange:
    start_line: int
    end_line: int
    content_hash: str


@dataclass
class RelatedRef:
    type: str
    value: str


@dataclass
class Conversation:
    url: str
    contributor: Contributor
    ranges: List[ContentRange] = field(default_factory=list)
    related: List[RelatedRef] = field(default_factory=list)


@dataclass
class FileChange:
    relative_path: str
    conversations: List[Conversation] = field(default_factory=list)


@dataclass
class TraceEntry:
    """One audit record for one allowed mutating call."""
    intent_id: str
    mutation_class: str
    revision_id: str
    files: List[FileChange] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "vcs": {"revision_id": self.revision_id},
            "intent_id": self.intent_id,
            "mutation_class": self.mutation_class,
            "files": [asdict(change) for change in self.files],
        }

    def to_json_line(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False) + "\n"


def line_span(content: str) -> int:
    """Number of lines in the new content (a trailing newline opens one more)."""
    return len(content.split("\n"))


def build_trace_entry(
    intent_id: str,
    relative_path: str,
    content: str,
    revision_id: str,
    mutation_class: str,
    model_identifier: Optional[str] = None,
    session_id: Optional[str] = None,
) -> TraceEntry:
    """Assemble one trace entry for a single file change."""
    conversation = Conversation(
        url=session_id or str(uuid.uuid4()),
        contributor=Contributor(model_identifier=model_identifier or UNKNOWN_MODEL),
        ranges=[ContentRange(start_line=1, end_line=line_span(content), content_hash=prefixed_digest(content))],
        related=[RelatedRef(type=RELATED_SPECIFICATION, value=intent_id)],
    )
    return TraceEntry(
        intent_id=intent_id,
        mutation_class=mutation_class,
        revision_id=revision_id,
        files=[FileChange(relative_path=relative_path, conversations=[conversation])],
    )


# ============================================================
# APPEND / READ
# ============================================================

def append_trace_entry(workspace_root: PathLike, entry: TraceEntry) -> str:
    """Append one entry as one line. Returns the entry id. Raises OSError."""
    trace_path = get_trace_path(workspace_root)
    line = entry.to_json_line()
    with _append_lock:
        trace_path.parent.mkdir(parents=True, exist_ok=True)
        with open(trace_path, "a", encoding="utf-8") as f:
            f.write(line)
    return entry.id


def _entry_paths(record: Dict[str, Any]) -> List[str]:
    files = record.get("files")
    if not isinstance(files, list):
        return []
    return [f.get("relative_path") for f in files if isinstance(f, dict)]


def read_trace(
    workspace_root: PathLike,
    intent_id: Optional[str] = None,
    path: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Read trace entries, newest first.

    Blank and corrupt lines (e.g. a partial line left by a crash) are
    skipped.
    """
    trace_path = get_trace_path(workspace_root)
    entries = []
    try:
        with open(trace_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError:
                    log_debug(f"Skipping corrupt trace line in {trace_path}")
                    continue
                if not isinstance(record, dict):
                    continue
                if intent_id and record.get("intent_id") != intent_id:
                    continue
                if path and path not in _entry_paths(record):
                    continue
                entries.append(record)
    except FileNotFoundError:
        return []

    entries.reverse()
    if limit is not None:
        entries = entries[:max(limit, 0)]
    return entries


# ============================================================
# POST-HOOK
# ============================================================

def record_mutation(context: InvocationContext, workspace_root: PathLike) -> Optional[TraceEntry]:
    """
    Persist provenance for a mutation that already executed.

    No-op (returns None) when the gate is off, no intent is bound, or
    the tool has no traceable path/content. Both writes are best-effort.
    """
    if not context.active_intent_id:
        return None

    if not is_enabled(workspace_root):
        return None

    extracted = modified_content_for(context.tool_name, context.params)
    if extracted is None:
        return None
    target_path, content = extracted

    intent_id = context.active_intent_id
    model_identifier = context.params.get(MODEL_IDENTIFIER_PARAM)
    session_id = context.params.get(SESSION_ID_PARAM)

    revision = resolve_revision(workspace_root)

    intent = resolve_intent(workspace_root, intent_id)
    intent_name = intent.display_name if intent is not None else intent_id

    entry = build_trace_entry(
        intent_id=intent_id,
        relative_path=target_path,
        content=content,
        revision_id=revision.revision_id,
        mutation_class=context.mutation_class,
        model_identifier=model_identifier if isinstance(model_identifier, str) else None,
        session_id=session_id if isinstance(session_id, str) else None,
    )

    try:
        append_trace_entry(workspace_root, entry)
    except OSError as e:
        log_error(f"Failed to append to agent trace for {target_path}: {e}")

    try:
        upsert_row(workspace_root, intent_id, intent_name, target_path, timestamp=entry.timestamp)
    except OSError as e:
        log_warn(f"Failed to update intent map for {target_path}: {e}")

    return entry
