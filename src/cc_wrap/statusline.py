"""Status line: one colored line summarizing the current session."""

import asyncio
import logging
import os
import re
from collections.abc import Awaitable
from datetime import datetime, timezone
from typing import TypeVar

from rich.console import Console
from rich.text import Text

from cc_wrap import settings
from cc_wrap.display import get_display_path
from cc_wrap.jsonio import decode_object, or_default
from cc_wrap.models import SessionStatus, StatusLineData, TokenMetrics
from cc_wrap.transcript import count_user_messages, get_token_metrics

logger = logging.getLogger(__name__)

T = TypeVar("T")

COMMENT_LINE = re.compile(r"^#.*$", re.MULTILINE)


def parse_input(raw: str) -> StatusLineData:
    """Decode the runtime's JSON payload. ``#`` lines are comments."""
    data = or_default(decode_object(COMMENT_LINE.sub("", raw), "status line input"), {})
    return StatusLineData.from_dict(data)


def capture_input(raw: str, session_id: str) -> None:
    """Save the raw payload for debugging. Best effort."""
    target = settings.CAPTURE_DIR / f"claude-statusline-{session_id or 'unknown'}.json"
    stamp = datetime.now(tz=timezone.utc).isoformat()
    try:
        target.write_text(f"# JSON input captured on {stamp}\n{raw}\n", encoding="utf-8")
    except OSError as e:
        logger.debug("Could not capture status line input: %s", e)


async def _bounded(lookup: Awaitable[T], default: T, label: str) -> T:
    try:
        return await asyncio.wait_for(lookup, settings.STATUSLINE_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.debug("%s lookup timed out", label)
    except Exception as e:
        logger.debug("%s lookup failed: %s", label, e)
    return default


async def enrich(data: StatusLineData) -> SessionStatus:
    """Resolve display path, turn count and token metrics concurrently."""
    directory = data.workspace.current_dir or data.cwd or os.getcwd()
    display_path, turns, metrics = await asyncio.gather(
        _bounded(get_display_path(directory), "", "display path"),
        _bounded(count_user_messages(data.transcript_path), 0, "turn count"),
        _bounded(get_token_metrics(data.transcript_path), TokenMetrics(), "token metrics"),
    )
    return SessionStatus(data=data, display_path=display_path, turn_count=turns, metrics=metrics)


def format_tokens(count: int) -> str:
    """128 -> "128", 45210 -> "45.2k", 1250000 -> "1.2M"."""
    if count < 1000:
        return str(count)
    if count < 1_000_000:
        return f"{count / 1000:.1f}k"
    return f"{count / 1_000_000:.1f}M"


def model_name(data: StatusLineData) -> str:
    if data.model.display_name:
        return data.model.display_name
    if data.model.id:
        return data.model.id.removeprefix("claude-")
    return "Claude"


def build_status_line(status: SessionStatus) -> Text:
    data = status.data
    line = Text()

    version = f"[v{data.version}] " if data.version else ""
    line.append(f"{version}🧠 {model_name(data)}", style="dim")
    line.append(" @ ")
    line.append(f"📁 {status.display_path}/", style="cyan")
    line.append(" ")

    if data.output_style and data.output_style != "default":
        line.append(f" [{data.output_style}]")
    if status.turn_count > 0:
        line.append(f" 💬 {status.turn_count}")
    if status.metrics.context_length > 0:
        line.append(f" 🧮 {format_tokens(status.metrics.context_length)}")

    added = data.cost.total_lines_added
    removed = data.cost.total_lines_removed
    if added > 0 or removed > 0:
        line.append(" [")
        if added > 0:
            line.append(f"+{added}", style="green")
        if added > 0 and removed > 0:
            line.append("/")
        if removed > 0:
            line.append(f"-{removed}", style="red")
        line.append("]")

    if data.cost.total_cost_usd > 0:
        line.append(f" 💰 ${data.cost.total_cost_usd:.2f}", style="bright_green")
    if data.exceeds_200k_tokens:
        line.append(" ⚠️ 200k+")
    return line


def render_ansi(line: Text) -> str:
    console = Console(
        force_terminal=True,
        color_system="standard",
        width=10_000,
        emoji=False,
        highlight=False,
    )
    with console.capture() as capture:
        console.print(line, end="", soft_wrap=True)
    return capture.get()


async def generate(raw: str) -> str:
    """Full pipeline: raw stdin payload to an ANSI-colored line."""
    data = parse_input(raw)
    if settings.CAPTURE_INPUT:
        capture_input(raw, data.session_id)
    status = await enrich(data)
    return render_ansi(build_status_line(status))
