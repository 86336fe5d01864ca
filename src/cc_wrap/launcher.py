"""Compose and start a Claude Code process."""

import asyncio
import logging
import signal
from dataclasses import dataclass, field
from typing import Any

from cc_wrap import settings
from cc_wrap.config import merge_config_files
from cc_wrap.errors import LaunchError
from cc_wrap.instructions import cleanup_instructions, sync_instructions
from cc_wrap.jsonio import read_text
from cc_wrap.mcp import build_mcp_servers, load_descriptors, mcp_arguments
from cc_wrap.providers import (
    EnvironmentSnapshot,
    ProviderConfig,
    ProviderId,
    get_provider,
    provider_environment,
)
from cc_wrap.settings import Paths

logger = logging.getLogger(__name__)


@dataclass
class LaunchPlan:
    """Everything needed to exec the assistant."""

    command: list[str]
    env: dict[str, str]
    mcp_servers: dict[str, dict[str, Any]] = field(default_factory=dict)


def compose_environment(
    base_env: EnvironmentSnapshot,
    provider: ProviderConfig | None = None,
    model: str | None = None,
) -> dict[str, str]:
    """Final child environment.

    Layers, later wins: process env, runtime flags, provider env, credential.
    Raises ``ProviderCredentialError`` if the provider has no key.
    """
    return {
        **base_env,
        **settings.CLAUDE_ENV,
        **provider_environment(provider, base_env, model),
    }


def build_arguments(
    args: list[str],
    system_prompt: str,
    mcp_servers: dict[str, dict[str, Any]],
) -> list[str]:
    out = list(args)
    if system_prompt.strip():
        out += ["--append-system-prompt", system_prompt]
    return out + mcp_arguments(mcp_servers)


def prepare_launch(
    args: list[str],
    env: EnvironmentSnapshot,
    paths: Paths,
    provider_id: ProviderId | None = None,
    model: str | None = None,
) -> LaunchPlan:
    """Validate, merge config and build the command line. Spawns nothing."""
    provider = get_provider(provider_id)
    if provider is not None:
        # Fail before touching any files
        provider.validate(env)
        logger.debug("Using provider %s at %s", provider.name, provider.base_url)

    merge_config_files(paths.global_config, paths.override_config)

    mcp_servers = build_mcp_servers(load_descriptors(paths.mcp))
    child_env = compose_environment(env, provider, model)
    claude_args = build_arguments(args, read_text(paths.append_prompt), mcp_servers)
    return LaunchPlan(
        command=[*settings.CLAUDE_COMMAND, *claude_args],
        env=child_env,
        mcp_servers=mcp_servers,
    )


async def run_process(plan: LaunchPlan) -> int:
    """Run the assistant with inherited stdio and return its exit code."""
    try:
        proc = await asyncio.create_subprocess_exec(*plan.command, env=plan.env)
    except OSError as e:
        raise LaunchError(f"Cannot start {plan.command[0]!r}: {e.strerror}") from e

    # Ctrl-C belongs to the interactive child while it runs
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, lambda: None)
        handled = True
    except (NotImplementedError, RuntimeError):
        handled = False
    try:
        return await proc.wait()
    finally:
        if handled:
            loop.remove_signal_handler(signal.SIGINT)


def launch(
    args: list[str],
    env: EnvironmentSnapshot,
    paths: Paths,
    provider_id: ProviderId | None = None,
    model: str | None = None,
) -> int:
    """Prepare, run and clean up. Returns the child's exit code."""
    plan = prepare_launch(args, env, paths, provider_id=provider_id, model=model)

    created = sync_instructions(paths.instructions_source, paths.instructions_target)
    try:
        return asyncio.run(run_process(plan))
    finally:
        if created:
            cleanup_instructions(paths.instructions_target)
