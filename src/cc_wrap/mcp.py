"""Build the runtime's mcpServers map from user-declared servers."""

import json
import logging
from pathlib import Path
from typing import Any

from cc_wrap.jsonio import or_default, read_json
from cc_wrap.models import ToolDescriptor, ToolRuntimeEntry

logger = logging.getLogger(__name__)


def load_descriptors(path: Path) -> list[ToolDescriptor]:
    """Read mcp.json. Missing, broken or non-list files declare nothing."""
    if not path.exists():
        return []
    raw = or_default(read_json(path), None)
    if not isinstance(raw, list):
        logger.warning("Ignoring %s: expected a JSON array of servers", path)
        return []
    return [ToolDescriptor.from_dict(item) for item in raw if isinstance(item, dict)]


def build_entry(descriptor: ToolDescriptor) -> ToolRuntimeEntry | None:
    """Convert one descriptor, or None if it names neither command nor url.

    "docker mcp run" becomes command "docker" with args ["mcp", "run"].
    A descriptor with both uses the command.
    """
    parts = (descriptor.command or "").split()
    if parts:
        if descriptor.url:
            logger.warning(
                "MCP server %r has both command and url; using command", descriptor.name
            )
        return ToolRuntimeEntry(
            type="stdio",
            command=parts[0],
            args=parts[1:],
            env=descriptor.env,
            extra=descriptor.extra,
        )
    if descriptor.url:
        return ToolRuntimeEntry(
            type="http",
            url=descriptor.url,
            env=descriptor.env,
            extra=descriptor.extra,
        )
    return None


def build_mcp_servers(descriptors: list[ToolDescriptor]) -> dict[str, dict[str, Any]]:
    """Map server name to runtime entry, dropping disabled servers."""
    servers: dict[str, dict[str, Any]] = {}
    for descriptor in descriptors:
        if descriptor.disabled:
            continue
        if not descriptor.name:
            logger.warning("Skipping MCP server without a name")
            continue
        entry = build_entry(descriptor)
        if entry is None:
            logger.warning("Skipping MCP server %r: no command or url", descriptor.name)
            continue
        servers[descriptor.name] = entry.to_dict()
    return servers


def mcp_arguments(servers: dict[str, dict[str, Any]]) -> list[str]:
    """CLI flags for the manifest. An empty manifest adds no flags at all."""
    if not servers:
        return []
    return ["--mcp-config", json.dumps({"mcpServers": servers}), "--strict-mcp-config"]
