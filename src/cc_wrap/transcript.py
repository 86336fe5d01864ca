"""Session transcript parsing: turn counting and token usage."""

import asyncio
import re
import threading
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar

from cc_wrap.errors import ParseError
from cc_wrap.jsonio import decode_object, or_default, read_text
from cc_wrap.models import TokenMetrics

# Substrings the runtime injects into synthetic "user" entries
SYNTHETIC_MARKERS = (
    "<command-name>",
    "<local-command-stdout>",
    "Caveat: The messages below",
)

# fromisoformat on 3.10 only accepts 3 or 6 fractional digits
FRACTION = re.compile(r"\.(\d+)")

T = TypeVar("T")


def read_transcript_lines(path: Path | str | None) -> list[str]:
    """Read a JSONL transcript, dropping blank lines.

    A missing or unreadable file is a session with no turns yet, so it
    yields an empty list rather than an error. Anything but a regular file
    (a FIFO, a device) is treated the same way, since reading it can block.

    Undecodable bytes are replaced per character: the runtime appends while
    we read, so the last line may stop mid-sequence. That line then fails
    JSON decoding on its own and the rest of the file still counts.
    """
    if not path:
        return []
    try:
        if not Path(path).is_file():
            return []
    except (OSError, ValueError):
        return []
    text = read_text(path, errors="replace")
    return [line for line in text.splitlines() if line.strip()]


def decode_entry(line: str) -> dict[str, Any] | ParseError:
    return decode_object(line, "transcript line")


def content_text(content: Any) -> str:
    """Flatten message content to text.

    Content is either a plain string or a list of blocks; only text blocks
    contribute.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and isinstance(block.get("text"), str):
                parts.append(block["text"])
        return "\n".join(parts)
    return ""


def is_genuine_user_entry(entry: dict[str, Any]) -> bool:
    """Whether a decoded entry is a turn the user actually typed."""
    if entry.get("type") != "user":
        return False
    if "toolUseResult" in entry or entry.get("isMeta"):
        return False
    message = entry.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    text = content_text(content)
    return not any(marker in text for marker in SYNTHETIC_MARKERS)


def is_user_message(line: str) -> bool:
    """Classify one raw transcript line. Undecodable lines are not turns."""
    entry = or_default(decode_entry(line), None)
    if entry is None:
        return False
    return is_genuine_user_entry(entry)


def count_turns(lines: list[str]) -> int:
    return sum(1 for line in lines if is_user_message(line))


def parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        normalized = FRACTION.sub(
            lambda m: "." + m.group(1)[:6].ljust(6, "0"), value.replace("Z", "+00:00"), count=1
        )
        ts = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    # Mixing naive and aware datetimes breaks sorting
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def usage_entries(lines: list[str]) -> list[tuple[datetime, dict[str, Any]]]:
    """Main-chain entries that carry a usage block and a timestamp."""
    found = []
    for line in lines:
        entry = or_default(decode_entry(line), None)
        if entry is None or entry.get("isSidechain") is True:
            continue
        message = entry.get("message")
        if not isinstance(message, dict) or not isinstance(message.get("usage"), dict):
            continue
        ts = parse_timestamp(entry.get("timestamp"))
        if ts is None:
            continue
        found.append((ts, message["usage"]))
    return found


def _tokens(usage: dict[str, Any], key: str) -> int:
    value = usage.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def context_length(usage: dict[str, Any]) -> int:
    """Standing context: fresh input plus both cache counters.

    Output tokens are excluded; they are generated, not loaded.
    """
    return (
        _tokens(usage, "input_tokens")
        + _tokens(usage, "cache_read_input_tokens")
        + _tokens(usage, "cache_creation_input_tokens")
    )


def latest_metrics(lines: list[str]) -> TokenMetrics:
    """Metrics from the most recent qualifying entry.

    ``sorted`` is stable, so among equal timestamps the entry later in the
    file wins.
    """
    entries = sorted(usage_entries(lines), key=lambda item: item[0])
    if not entries:
        return TokenMetrics()
    _, usage = entries[-1]
    return TokenMetrics(context_length=context_length(usage))


async def _off_loop(func: Callable[[], T]) -> T:
    """Run a blocking read in a daemon thread and await its result.

    Unlike the default executor, an abandoned daemon thread does not hold
    up ``asyncio.run`` or interpreter exit, so a caller's timeout really
    bounds a stalled read.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[T] = loop.create_future()

    def deliver(setter: Callable[[Any], None], value: Any) -> None:
        if not future.done():
            setter(value)

    def post(setter: Callable[[Any], None], value: Any) -> None:
        try:
            loop.call_soon_threadsafe(deliver, setter, value)
        except RuntimeError:
            pass  # loop already closed; nobody is waiting

    def work() -> None:
        try:
            result = func()
        except Exception as e:
            post(future.set_exception, e)
        else:
            post(future.set_result, result)

    threading.Thread(target=work, name="cc-wrap-transcript", daemon=True).start()
    return await future


async def count_user_messages(path: Path | str | None) -> int:
    """Count quota-relevant user turns in a transcript file."""
    if not path:
        return 0
    return await _off_loop(lambda: count_turns(read_transcript_lines(path)))


async def get_token_metrics(path: Path | str | None) -> TokenMetrics:
    """Token metrics for the latest main-chain entry in a transcript file."""
    if not path:
        return TokenMetrics()
    return await _off_loop(lambda: latest_metrics(read_transcript_lines(path)))
