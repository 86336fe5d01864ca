"""cc-wrap configuration, read once from the environment."""

import os
import shlex
import tempfile
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    if not value:
        return default
    return Path(value).expanduser()


def _env_command(name: str, default: str) -> list[str]:
    value = os.getenv(name) or ""
    try:
        parts = shlex.split(value)
    except ValueError:
        # Unbalanced quotes; keep the words rather than fail at import
        parts = value.split()
    return parts or shlex.split(default)


CLAUDE_HOME = _env_path("CC_WRAP_CLAUDE_HOME", Path.home() / ".claude")
GLOBAL_CONFIG = _env_path("CC_WRAP_GLOBAL_CONFIG", Path.home() / ".claude.json")
INSTRUCTIONS_SOURCE = _env_path(
    "CC_WRAP_INSTRUCTIONS_SOURCE", Path.home() / ".config" / "agents" / "instructions.md"
)

# How the assistant itself is started
DEFAULT_CLAUDE_COMMAND = "bun x --bun @anthropic-ai/claude-code@latest"
CLAUDE_COMMAND = _env_command("CC_WRAP_CLAUDE_COMMAND", DEFAULT_CLAUDE_COMMAND)

# Status line
STATUSLINE_TIMEOUT_SECONDS = _env_float("CC_WRAP_STATUSLINE_TIMEOUT", 2.0)
CAPTURE_INPUT = _env_bool("CC_WRAP_CAPTURE_INPUT", False)
CAPTURE_DIR = _env_path("CC_WRAP_CAPTURE_DIR", Path(tempfile.gettempdir()))

# Flags that switch off non-essential runtime features
CLAUDE_ENV: dict[str, str] = {
    "CLAUDE_BASH_MAINTAIN_PROJECT_WORKING_DIR": "1",
    "CLAUDE_CODE_DISABLE_NONESSENTIAL_TRAFFIC": "1",
    "DEV": "1",
    "DISABLE_AUTOUPDATER": "1",
    "DISABLE_BUG_COMMAND": "1",
    "DISABLE_DOCTOR_COMMAND": "1",
    "DISABLE_INSTALL_GITHUB_APP_COMMAND": "1",
    "DISABLE_LOGIN_COMMAND": "1",
    "DISABLE_LOGOUT_COMMAND": "1",
    "DISABLE_MIGRATE_INSTALLER_COMMAND": "1",
    "DISABLE_NON_ESSENTIAL_MODEL_CALLS": "1",
    "DISABLE_TELEMETRY": "1",
    "DISABLE_UPGRADE_COMMAND": "1",
    "USE_BUILTIN_RIPGREP": "1",
}


@dataclass(frozen=True)
class Paths:
    """Well-known files the launcher reads and writes."""

    override_config: Path  # layered on top of global_config
    global_config: Path  # the runtime's own config, rewritten on launch
    mcp: Path  # JSON array of tool descriptors
    append_prompt: Path
    instructions_source: Path
    instructions_target: Path


def default_paths() -> Paths:
    return Paths(
        override_config=CLAUDE_HOME / "claude.json",
        global_config=GLOBAL_CONFIG,
        mcp=CLAUDE_HOME / "mcp.json",
        append_prompt=CLAUDE_HOME / "bin" / "lib" / "auto-plan-mode.in",
        instructions_source=INSTRUCTIONS_SOURCE,
        instructions_target=CLAUDE_HOME / "CLAUDE.md",
    )
