"""Integration tests for the CLI."""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[2] / "src"


def run_cli(*args, input=None, env=None, timeout=None):
    env = dict(os.environ if env is None else env)
    # Works without an editable install too
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC_DIR), env.get("PYTHONPATH")]))
    env["PYTHONIOENCODING"] = "utf-8"
    return subprocess.run(
        [sys.executable, "-m", "cc_wrap.cli", *args],
        capture_output=True,
        text=True,
        encoding="utf-8",
        input=input,
        env=env,
        timeout=timeout,
    )


def isolated_env(temp_dir, **extra):
    env = {k: v for k, v in os.environ.items() if not k.endswith("_API_KEY")}
    env.update(
        CC_WRAP_CLAUDE_HOME=str(temp_dir / ".claude"),
        CC_WRAP_GLOBAL_CONFIG=str(temp_dir / ".claude.json"),
        CC_WRAP_INSTRUCTIONS_SOURCE=str(temp_dir / "instructions.md"),
        CC_WRAP_CAPTURE_INPUT="0",
    )
    env.update(extra)
    return env


def test_cli_help():
    """Test that --help works."""
    result = run_cli("--help")
    assert result.returncode == 0
    assert "statusline" in result.stdout
    assert "launch" in result.stdout
    assert "providers" in result.stdout


def test_cli_version():
    """Test that --version works."""
    result = run_cli("--version")
    assert result.returncode == 0
    assert "cc-wrap" in result.stdout


def test_statusline_from_stdin(sample_transcript, temp_dir):
    payload = json.dumps(
        {
            "transcript_path": str(sample_transcript),
            "cwd": str(temp_dir),
            "model": {"display_name": "Opus"},
            "cost": {"total_cost_usd": 1.5},
        }
    )
    result = run_cli("statusline", input="# comment\n" + payload, env=isolated_env(temp_dir))

    assert result.returncode == 0
    assert result.stdout.count("\n") == 1
    assert "Opus" in result.stdout
    assert "💬 2" in result.stdout
    assert "$1.50" in result.stdout


def test_statusline_survives_bad_input(temp_dir):
    result = run_cli("statusline", input="not json at all", env=isolated_env(temp_dir))
    assert result.returncode == 0
    assert "Claude" in result.stdout


def test_statusline_from_file(temp_dir):
    payload = temp_dir / "input.json"
    payload.write_text(json.dumps({"model": {"id": "claude-haiku-4-5"}}))

    result = run_cli("statusline", str(payload), env=isolated_env(temp_dir))
    assert result.returncode == 0
    assert "haiku-4-5" in result.stdout


def test_statusline_with_unbalanced_command_setting(temp_dir):
    env = isolated_env(temp_dir, CC_WRAP_CLAUDE_COMMAND="claude 'oops")
    result = run_cli("statusline", input="{}", env=env)
    assert result.returncode == 0
    assert "Claude" in result.stdout


def test_statusline_with_fifo_transcript_finishes(temp_dir):
    if not hasattr(os, "mkfifo"):
        pytest.skip("named pipes not available")
    fifo = temp_dir / "session.jsonl"
    os.mkfifo(fifo)
    payload = json.dumps({"transcript_path": str(fifo), "cwd": str(temp_dir)})

    result = run_cli(
        "statusline",
        input=payload,
        env=isolated_env(temp_dir, CC_WRAP_STATUSLINE_TIMEOUT="0.2"),
        timeout=10,
    )
    assert result.returncode == 0
    assert "Claude" in result.stdout


def test_launch_missing_credential_exits_nonzero(temp_dir):
    result = run_cli(
        "launch",
        "--provider",
        "glm",
        env=isolated_env(temp_dir, CC_WRAP_CLAUDE_COMMAND="/nonexistent/claude"),
    )
    assert result.returncode == 1
    assert "ZAI_API_KEY" in result.stderr


def test_launch_passes_through_args_and_exit_code(temp_dir):
    script = "import sys; sys.exit(len(sys.argv[1:]))"
    command = f'{sys.executable} -c "{script}"'
    result = run_cli(
        "launch",
        "--resume",
        "abc",
        env=isolated_env(temp_dir, CC_WRAP_CLAUDE_COMMAND=command),
    )
    assert result.returncode == 2


def test_providers_json(temp_dir):
    result = run_cli("providers", "--json", env=isolated_env(temp_dir, ZAI_API_KEY="k"))
    assert result.returncode == 0

    data = json.loads(result.stdout)
    ready = {p["id"]: p["ready"] for p in data["providers"]}
    assert ready == {"glm": True, "minimax": False, "chutes": False}


def test_manifest_json(temp_dir):
    claude_home = temp_dir / ".claude"
    claude_home.mkdir()
    (claude_home / "mcp.json").write_text(
        json.dumps(
            [
                {"name": "docker", "command": "docker mcp run"},
                {"name": "off", "url": "https://x", "disabled": True},
            ]
        )
    )
    result = run_cli("manifest", "--json", env=isolated_env(temp_dir))
    assert result.returncode == 0
    assert json.loads(result.stdout) == {
        "mcpServers": {"docker": {"type": "stdio", "command": "docker", "args": ["mcp", "run"]}}
    }
