"""Central loguru setup. Modules just do `from loguru import logger`; the application calls `configure_logging` once."""

import sys
from pathlib import Path

from loguru import logger

from src.core.config import LOG_FILE, LOG_LEVEL

_sink_ids: list[int] = []


def configure_logging(level: str = LOG_LEVEL, log_file: str = LOG_FILE) -> list[int]:
    """
    Replace loguru's default sink with a stderr sink at `level`, plus a rotating file sink if `log_file` is set.
    Calling it again swaps the previously added sinks. Returns the sink ids.
    """
    global _sink_ids
    if not _sink_ids:
        # first call: drop loguru's own default handler
        logger.remove()
    for sink_id in _sink_ids:
        logger.remove(sink_id)
    _sink_ids = [logger.add(sys.stderr, level=level)]

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        _sink_ids.append(logger.add(path, rotation="10 MB", level=level))
    return _sink_ids
