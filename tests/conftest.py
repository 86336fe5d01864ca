"""Pytest fixtures for cc-wrap tests."""

import json
import tempfile
from pathlib import Path

import pytest

from cc_wrap.settings import Paths


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _write_jsonl(path: Path, records: list) -> Path:
    with open(path, "w") as f:
        for record in records:
            f.write(record if isinstance(record, str) else json.dumps(record))
            f.write("\n")
    return path


@pytest.fixture
def write_jsonl():
    """Write records (dicts or raw strings) as one JSON line each."""
    return _write_jsonl


@pytest.fixture
def sample_transcript(temp_dir):
    """A session with two real turns, synthetic entries and a side chain."""
    records = [
        {
            "type": "user",
            "uuid": "msg-001",
            "timestamp": "2024-01-15T10:00:00Z",
            "message": {"role": "user", "content": "How do I implement authentication?"},
        },
        {
            "type": "assistant",
            "uuid": "msg-002",
            "timestamp": "2024-01-15T10:00:05Z",
            "message": {
                "role": "assistant",
                "content": [{"type": "text", "text": "Use JWT tokens..."}],
                "usage": {
                    "input_tokens": 10,
                    "output_tokens": 500,
                    "cache_creation_input_tokens": 1000,
                    "cache_read_input_tokens": 2000,
                },
            },
        },
        {
            "type": "user",
            "uuid": "msg-003",
            "timestamp": "2024-01-15T10:00:06Z",
            "toolUseResult": {"stdout": "ok"},
            "message": {"role": "user", "content": [{"type": "tool_result", "content": "ok"}]},
        },
        {
            "type": "user",
            "uuid": "msg-004",
            "timestamp": "2024-01-15T10:00:07Z",
            "message": {
                "role": "user",
                "content": "<command-name>/clear</command-name>",
            },
        },
        "{not valid json",
        {
            "type": "user",
            "uuid": "msg-005",
            "timestamp": "2024-01-15T10:01:00Z",
            "message": {"role": "user", "content": "Can you show me an example?"},
        },
        {
            "type": "assistant",
            "uuid": "msg-006",
            "timestamp": "2024-01-15T10:01:10Z",
            "message": {
                "role": "assistant",
                "content": [{"type": "text", "text": "Here's an example..."}],
                "usage": {
                    "input_tokens": 20,
                    "output_tokens": 800,
                    "cache_creation_input_tokens": 300,
                    "cache_read_input_tokens": 4000,
                },
            },
        },
        {
            "type": "assistant",
            "uuid": "msg-007",
            "isSidechain": True,
            "timestamp": "2024-01-15T10:05:00Z",
            "message": {
                "role": "assistant",
                "content": [{"type": "text", "text": "sub-task"}],
                "usage": {"input_tokens": 99999, "cache_read_input_tokens": 99999},
            },
        },
    ]
    return _write_jsonl(temp_dir / "session.jsonl", records)


@pytest.fixture
def paths(temp_dir):
    """Well-known launcher paths redirected into a temp directory."""
    claude_home = temp_dir / ".claude"
    claude_home.mkdir()
    return Paths(
        override_config=claude_home / "claude.json",
        global_config=temp_dir / ".claude.json",
        mcp=claude_home / "mcp.json",
        append_prompt=claude_home / "bin" / "lib" / "auto-plan-mode.in",
        instructions_source=temp_dir / ".config" / "agents" / "instructions.md",
        instructions_target=claude_home / "CLAUDE.md",
    )
