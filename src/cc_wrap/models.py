"""Data models for cc-wrap."""

import math
from dataclasses import dataclass, field
from typing import Any


def _dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _number(value: Any) -> float:
    # bool is an int subclass; treat it as missing
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return 0
    try:
        finite = math.isfinite(value)
    except OverflowError:
        return 0  # integer too large for a float
    return value if finite else 0


@dataclass
class ModelInfo:
    id: str = ""
    display_name: str = ""


@dataclass
class WorkspaceInfo:
    current_dir: str = ""
    project_dir: str = ""


@dataclass
class CostInfo:
    total_cost_usd: float = 0
    total_duration_ms: float = 0
    total_api_duration_ms: float = 0
    total_lines_added: int = 0
    total_lines_removed: int = 0


@dataclass
class StatusLineData:
    """The JSON payload the runtime pipes into the status line command.

    Every field is optional; missing or mistyped values become defaults.
    """

    session_id: str = ""
    transcript_path: str = ""
    cwd: str = ""
    model: ModelInfo = field(default_factory=ModelInfo)
    workspace: WorkspaceInfo = field(default_factory=WorkspaceInfo)
    version: str = ""
    output_style: str = ""
    cost: CostInfo = field(default_factory=CostInfo)
    exceeds_200k_tokens: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StatusLineData":
        model = _dict(data.get("model"))
        workspace = _dict(data.get("workspace"))
        cost = _dict(data.get("cost"))
        return cls(
            session_id=_str(data.get("session_id")),
            transcript_path=_str(data.get("transcript_path")),
            cwd=_str(data.get("cwd")),
            model=ModelInfo(
                id=_str(model.get("id")),
                display_name=_str(model.get("display_name")),
            ),
            workspace=WorkspaceInfo(
                current_dir=_str(workspace.get("current_dir")),
                project_dir=_str(workspace.get("project_dir")),
            ),
            version=_str(data.get("version")),
            output_style=_str(_dict(data.get("output_style")).get("name")),
            cost=CostInfo(
                total_cost_usd=_number(cost.get("total_cost_usd")),
                total_duration_ms=_number(cost.get("total_duration_ms")),
                total_api_duration_ms=_number(cost.get("total_api_duration_ms")),
                total_lines_added=int(_number(cost.get("total_lines_added"))),
                total_lines_removed=int(_number(cost.get("total_lines_removed"))),
            ),
            exceeds_200k_tokens=data.get("exceeds_200k_tokens") is True,
        )


@dataclass
class TokenMetrics:
    """Token footprint of the most recent main-chain entry."""

    context_length: int = 0


@dataclass
class SessionStatus:
    """Status line input enriched with values derived from disk."""

    data: StatusLineData
    display_path: str = ""
    turn_count: int = 0
    metrics: TokenMetrics = field(default_factory=TokenMetrics)


@dataclass
class ToolDescriptor:
    """A user-declared MCP server, as written in mcp.json."""

    name: str
    command: str | None = None
    url: str | None = None
    env: dict[str, Any] | None = None
    disabled: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolDescriptor":
        known = {"name", "command", "url", "env", "disabled"}
        env = data.get("env")
        return cls(
            name=_str(data.get("name")),
            command=_str(data.get("command")) or None,
            url=_str(data.get("url")) or None,
            env=env if isinstance(env, dict) else None,
            disabled=data.get("disabled") is True,
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass
class ToolRuntimeEntry:
    """A server entry in the runtime's ``mcpServers`` map."""

    type: str  # "stdio" | "http"
    command: str | None = None
    args: list[str] = field(default_factory=list)
    url: str | None = None
    env: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.extra)
        out["type"] = self.type
        if self.type == "stdio":
            out["command"] = self.command
            out["args"] = list(self.args)
        else:
            out["url"] = self.url
        if self.env is not None:
            out["env"] = self.env
        return out
