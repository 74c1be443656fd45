"""Runtime settings. Every value can be overridden through an environment variable of the same name."""

import os


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# --- Persistence ---
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///connect_four.db")
DATABASE_ECHO: bool = _env_bool("DATABASE_ECHO", False)

# --- Logging ---
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
# Empty string disables the file sink
LOG_FILE: str = os.getenv("LOG_FILE", "")

# --- Search engine ---
SEARCH_MAX_DEPTH: int = _env_int("SEARCH_MAX_DEPTH", 10)
# Wall-clock budget (seconds) for a single search
SEARCH_TIME_LIMIT: float = _env_float("SEARCH_TIME_LIMIT", 10.0)

# --- Turn orchestration ---
ORCHESTRATOR_MAX_ATTEMPTS: int = _env_int("ORCHESTRATOR_MAX_ATTEMPTS", 3)
AI_DELAY_MIN: float = _env_float("AI_DELAY_MIN", 0.0)
AI_DELAY_MAX: float = _env_float("AI_DELAY_MAX", 0.0)
if AI_DELAY_MAX < AI_DELAY_MIN:
    AI_DELAY_MAX = AI_DELAY_MIN

# --- Service ---
RECENT_GAMES_LIMIT: int = _env_int("RECENT_GAMES_LIMIT", 20)
