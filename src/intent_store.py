"""
Intent Store - Registry Reader
==============================

Reads `.orchestration/active_intents.yaml`, the human-maintained list of
authorized units of work:

    active_intents:
      - id: INT-001
        name: Build the weather API
        status: IN_PROGRESS
        owned_scope:
          - src/api/**
        constraints:
          - No new dependencies
        acceptance_criteria:
          - Unit tests green

The registry is parsed fully on every call. Edits take effect on the
next tool call; there is no cache to invalidate.

A broken registry is never a hard failure. Unreadable or malformed
content yields a snapshot with no intents and a status that says why,
so the gate can still build the most specific message it can.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from gate_logger import log_warn
from orchestration_config import PathLike, get_registry_path


REGISTRY_TOP_LEVEL_KEY = "active_intents"


class RegistryStatus:
    """Outcome of reading the registry file."""
    LOADED = "loaded"
    MISSING = "missing"
    UNREADABLE = "unreadable"
    MALFORMED = "malformed"


# ============================================================
# INTENT
# ============================================================

def _as_str_list(value: Any) -> List[str]:
    """Coerce a YAML list field into a list of strings; anything else is empty."""
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


@dataclass
class Intent:
    """A registry-declared unit of authorized work."""
    id: str
    name: str = ""
    status: str = ""
    owned_scope: List[str] = field(default_factory=list)
    constraints: List[str] = field(default_factory=list)
    acceptance_criteria: List[str] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> Optional["Intent"]:
        """Build from one YAML mapping. Records without an id are skipped."""
        if not isinstance(record, dict):
            return None
        intent_id = record.get("id")
        if intent_id is None or str(intent_id).strip() == "":
            return None
        return cls(
            id=str(intent_id),
            name=str(record.get("name") or ""),
            status=str(record.get("status") or ""),
            owned_scope=_as_str_list(record.get("owned_scope")),
            constraints=_as_str_list(record.get("constraints")),
            acceptance_criteria=_as_str_list(record.get("acceptance_criteria")),
        )

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "owned_scope": list(self.owned_scope),
            "constraints": list(self.constraints),
            "acceptance_criteria": list(self.acceptance_criteria),
        }


# ============================================================
# REGISTRY SNAPSHOT
# ============================================================

@dataclass
class RegistrySnapshot:
    """One full parse of the registry file."""
    status: str
    intents: List[Intent] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def readable(self) -> bool:
        return self.status == RegistryStatus.LOADED

    @property
    def intent_ids(self) -> List[str]:
        return [intent.id for intent in self.intents]

    def get(self, intent_id: str) -> Optional[Intent]:
        for intent in self.intents:
            if intent.id == intent_id:
                return intent
        return None

    def available_ids_text(self, unreadable_text: str) -> str:
        """
        Best-effort rendering of the known ids for an error message.

        `unreadable_text` is used when the file could not be read or parsed.
        """
        if not self.readable:
            return unreadable_text
        return ", ".join(self.intent_ids) or "none"


def load_registry(workspace_root: PathLike) -> RegistrySnapshot:
    """Read and parse the registry. Never raises."""
    registry_path = get_registry_path(workspace_root)

    try:
        with open(registry_path, "r", encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        return RegistrySnapshot(status=RegistryStatus.MISSING, error="registry file not found")
    except (OSError, UnicodeDecodeError) as e:
        log_warn(f"Intent registry unreadable at {registry_path}: {e}")
        return RegistrySnapshot(status=RegistryStatus.UNREADABLE, error=str(e))

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        log_warn(f"Intent registry is not valid YAML at {registry_path}: {e}")
        return RegistrySnapshot(status=RegistryStatus.MALFORMED, error=f"invalid YAML: {e}")

    if not isinstance(data, dict) or not isinstance(data.get(REGISTRY_TOP_LEVEL_KEY), list):
        log_warn(f"Intent registry at {registry_path} has no '{REGISTRY_TOP_LEVEL_KEY}' list")
        return RegistrySnapshot(
            status=RegistryStatus.MALFORMED,
            error=f"expected a mapping with an '{REGISTRY_TOP_LEVEL_KEY}' list",
        )

    intents = []
    for record in data[REGISTRY_TOP_LEVEL_KEY]:
        intent = Intent.from_record(record)
        if intent is not None:
            intents.append(intent)

    return RegistrySnapshot(status=RegistryStatus.LOADED, intents=intents)


def resolve_intent(workspace_root: PathLike, intent_id: str) -> Optional[Intent]:
    """Look up one intent by id. None covers both "unknown id" and "no usable registry"."""
    if not intent_id:
        return None
    return load_registry(workspace_root).get(intent_id)


def list_intent_ids(workspace_root: PathLike) -> List[str]:
    return load_registry(workspace_root).intent_ids


# ============================================================
# CONTEXT RENDERING
# ============================================================

_LIST_JOIN = "\n    "


def render_intent_context(intent: Intent) -> str:
    """
    Render the intent as an <intent_context> block for the caller.

    Empty lists never render blank: scope says "Any", the others "None".
    """
    scope_list = _LIST_JOIN.join(intent.owned_scope) or "Any"
    constraint_list = _LIST_JOIN.join(intent.constraints) or "None"
    criteria_list = _LIST_JOIN.join(intent.acceptance_criteria) or "None"

    lines = [
        "<intent_context>",
        f"  <id>{intent.id}</id>",
        f"  <name>{intent.name}</name>",
        f"  <status>{intent.status}</status>",
        "  <owned_scope>",
        f"    {scope_list}",
        "  </owned_scope>",
        "  <constraints>",
        f"    {constraint_list}",
        "  </constraints>",
        "  <acceptance_criteria>",
        f"    {criteria_list}",
        "  </acceptance_criteria>",
        "</intent_context>",
    ]
    return "\n".join(lines)
