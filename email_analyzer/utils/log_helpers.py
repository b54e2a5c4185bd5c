import asyncio
import json
import logging
import os
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


def _append(path: str, entry: str) -> None:
    with open(path, "a", encoding="utf-8") as f:
        f.write(entry)


async def create_log(file_name: str, content: dict, log_dir: str = ".") -> None:
    """Append a timestamped JSON line to today's `<date>_<file_name>` log.

    Write failures are reported on the console and never raised.
    """
    now = datetime.now(timezone.utc)
    path = os.path.join(log_dir, f"{now.date().isoformat()}_{file_name}")
    entry = f"{now.isoformat()} {json.dumps(content, default=str)}\n\n"

    try:
        await asyncio.to_thread(_append, path, entry)
    except OSError as e:
        logger.error(f"Error writing to log {path}: {e}")
