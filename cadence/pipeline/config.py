"""Pipeline configuration from the environment."""

import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ANALYSIS_WORKERS = 2


def get_analysis_worker_count() -> int:
    """Get the analysis thread pool size.

    Environment variables:
        CADENCE_ANALYSIS_WORKERS: Number of analysis threads (default: 2)
    """
    raw = os.environ.get("CADENCE_ANALYSIS_WORKERS", "")
    if not raw:
        return DEFAULT_ANALYSIS_WORKERS
    try:
        workers = int(raw)
    except ValueError:
        msg = f"CADENCE_ANALYSIS_WORKERS must be an integer, got {raw!r}"
        raise ValueError(msg) from None
    if workers < 1:
        msg = f"CADENCE_ANALYSIS_WORKERS must be at least 1, got {workers}"
        raise ValueError(msg)
    return workers
