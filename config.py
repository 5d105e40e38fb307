"""
Configuration settings for the Snowflake ID generator.
"""

import os
import logging
from dotenv import load_dotenv, find_dotenv

# Load environment variables from a .env file if present
load_dotenv(find_dotenv(usecwd=True))

logger = logging.getLogger(__name__)


def _int_env(name, default):
    """Read an integer from the environment, falling back to the default"""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


def _float_env(name, default):
    """Read a float from the environment, falling back to the default"""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default


def _log_level_env(name, default):
    """Read a logging level name from the environment, falling back to the default"""
    level = os.getenv(name, default).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning(f"Ignoring unknown {name}={level!r}, using {default}")
        return default
    return level


# Coordinate pair assigned to this process by the deployment tooling
DATACENTER_ID = _int_env("SNOWFLAKE_DATACENTER_ID", 0)
WORKER_ID = _int_env("SNOWFLAKE_WORKER_ID", 0)

# Seconds to sleep between clock samples while waiting for the next millisecond
# 0 keeps a tight re-sampling loop
SPIN_SLEEP = max(0.0, _float_env("SNOWFLAKE_SPIN_SLEEP", 0.0))

# Logging settings
LOG_LEVEL = _log_level_env("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
