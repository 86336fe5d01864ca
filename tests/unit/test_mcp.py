"""Tests for the MCP manifest builder."""

import json
import logging

from cc_wrap.mcp import build_mcp_servers, load_descriptors, mcp_arguments
from cc_wrap.models import ToolDescriptor


def descriptors(*items):
    return [ToolDescriptor.from_dict(item) for item in items]


def test_command_is_split_into_executable_and_args():
    servers = build_mcp_servers(descriptors({"name": "docker", "command": "docker mcp run"}))
    assert servers == {"docker": {"type": "stdio", "command": "docker", "args": ["mcp", "run"]}}


def test_extra_whitespace_in_command():
    servers = build_mcp_servers(descriptors({"name": "x", "command": "  npx   -y  pkg "}))
    assert servers["x"]["command"] == "npx"
    assert servers["x"]["args"] == ["-y", "pkg"]


def test_url_server():
    servers = build_mcp_servers(descriptors({"name": "ctx", "url": "https://mcp.example.com/mcp"}))
    assert servers == {"ctx": {"type": "http", "url": "https://mcp.example.com/mcp"}}


def test_env_and_extra_keys_pass_through():
    servers = build_mcp_servers(
        descriptors(
            {"name": "a", "command": "tool", "env": {"TOKEN": "t", "PORT": 1}},
            {"name": "b", "url": "https://x", "headers": {"Authorization": "Bearer y"}},
        )
    )
    assert servers["a"] == {"type": "stdio", "command": "tool", "args": [], "env": {"TOKEN": "t", "PORT": 1}}
    assert servers["b"] == {"type": "http", "url": "https://x", "headers": {"Authorization": "Bearer y"}}


def test_disabled_servers_are_dropped():
    servers = build_mcp_servers(
        descriptors(
            {"name": "off", "command": "docker mcp run", "disabled": True},
            {"name": "off-url", "url": "https://x", "disabled": True, "env": {"A": "1"}},
            {"name": "on", "url": "https://y"},
        )
    )
    assert list(servers) == ["on"]


def test_command_wins_over_url(caplog):
    with caplog.at_level(logging.WARNING, logger="cc_wrap"):
        servers = build_mcp_servers(
            descriptors({"name": "both", "command": "srv --stdio", "url": "https://x"})
        )
    assert servers["both"] == {"type": "stdio", "command": "srv", "args": ["--stdio"]}
    assert "both command and url" in caplog.text


def test_unusable_descriptors_are_skipped():
    servers = build_mcp_servers(
        descriptors({"command": "no-name"}, {"name": "nothing"}, {"name": "blank", "command": "   "})
    )
    assert servers == {}


def test_empty_list_gives_empty_map_and_no_flags():
    servers = build_mcp_servers([])
    assert servers == {}
    assert mcp_arguments(servers) == []


def test_mcp_arguments_serialize_manifest():
    servers = build_mcp_servers(descriptors({"name": "docker", "command": "docker mcp run"}))
    args = mcp_arguments(servers)

    assert args[0] == "--mcp-config"
    assert json.loads(args[1]) == {"mcpServers": servers}
    assert args[2] == "--strict-mcp-config"


def test_load_descriptors(temp_dir):
    path = temp_dir / "mcp.json"
    assert load_descriptors(path) == []

    path.write_text(json.dumps([{"name": "a", "url": "https://a"}, "junk"]))
    loaded = load_descriptors(path)
    assert [d.name for d in loaded] == ["a"]

    path.write_text('{"name": "not-a-list"}')
    assert load_descriptors(path) == []

    path.write_text("{broken")
    assert load_descriptors(path) == []
