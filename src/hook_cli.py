#!/usr/bin/env python3
"""Command-line hook executor for the intent gate.

The agent runtime pipes one JSON invocation context to stdin:

    {"toolName": "write_to_file",
     "params": {"path": "src/app.py", "content": "..."},
     "activeIntentId": "INT-001"}

Usage:
    intent-gate pre  [--workspace DIR]   # prints {"allow": ..., "error": ..., "injectedContext": ...}
    intent-gate post [--workspace DIR]   # prints {"recorded": true|false}
    intent-gate status [--workspace DIR]
    intent-gate lesson CATEGORY "lesson text" [--file PATH]

The decision is always in the JSON payload; the exit code is 0 unless
the command line itself is wrong.
"""

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

from gate_logger import log_error, log_warn
from hook_engine import HOOK_ENGINE_VERSION, run_post_hook, run_pre_hook
from intent_store import load_registry
from invocation import DecisionResult, InvalidInvocationError, InvocationContext
from lesson_recorder import LessonCategory, record_lesson
from orchestration_config import get_registry_path, is_enabled

INVALID_INPUT_REASON = "invalid_input"


def _read_context(stream) -> InvocationContext:
    raw = stream.read()
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidInvocationError(f"stdin is not valid JSON: {e}")
    return InvocationContext.from_payload(payload)


def _emit(payload: Dict[str, Any]):
    sys.stdout.write(json.dumps(payload) + "\n")
    sys.stdout.flush()


def cmd_pre(args) -> int:
    try:
        context = _read_context(sys.stdin)
    except InvalidInvocationError as e:
        # Malformed input to the hook itself: fail closed
        log_warn(f"pre-hook rejected input: {e}")
        _emit(DecisionResult.denied(INVALID_INPUT_REASON, f"Intent gate could not parse the tool call: {e}").to_dict())
        return 0

    _emit(run_pre_hook(context, args.workspace).to_dict())
    return 0


def cmd_post(args) -> int:
    try:
        context = _read_context(sys.stdin)
    except InvalidInvocationError as e:
        log_error(f"post-hook ignored unparsable input: {e}")
        _emit({"recorded": False})
        return 0

    entry = run_post_hook(context, args.workspace)
    payload: Dict[str, Any] = {"recorded": entry is not None}
    if entry is not None:
        payload["traceId"] = entry.id
    _emit(payload)
    return 0


def cmd_status(args) -> int:
    snapshot = load_registry(args.workspace)
    _emit({
        "version": HOOK_ENGINE_VERSION,
        "enabled": is_enabled(args.workspace),
        "registry": str(get_registry_path(args.workspace)),
        "registry_status": snapshot.status,
        "intent_ids": snapshot.intent_ids,
    })
    return 0


def cmd_lesson(args) -> int:
    try:
        message = record_lesson(args.workspace, args.category, args.lesson, file_context=args.file)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    _emit({"message": message})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="intent-gate", description="Intent gate hook executor")
    parser.add_argument("--version", action="version", version=f"%(prog)s {HOOK_ENGINE_VERSION}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--workspace", "-w",
        default=os.getcwd(),
        help="Workspace root (default: current directory)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    pre = sub.add_parser("pre", parents=[common], help="Decide a tool call read from stdin")
    pre.set_defaults(func=cmd_pre)

    post = sub.add_parser("post", parents=[common], help="Record a completed tool call read from stdin")
    post.set_defaults(func=cmd_post)

    status = sub.add_parser("status", parents=[common], help="Show whether the gate is active")
    status.set_defaults(func=cmd_status)

    lesson = sub.add_parser("lesson", parents=[common], help="Append a lesson to AGENTS.md")
    lesson.add_argument("category", choices=[c.value for c in LessonCategory])
    lesson.add_argument("lesson", help="The lesson, 1-3 sentences")
    lesson.add_argument("--file", help="File or component the lesson relates to")
    lesson.set_defaults(func=cmd_lesson)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
