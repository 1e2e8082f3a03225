"""ID generation and timestamp utilities."""

import time
import uuid


def generate_run_id() -> str:
    """Generate a unique demo run ID (UUID4)."""
    return str(uuid.uuid4())


def generate_request_id() -> str:
    """Generate a short request ID for generation diagnostics."""
    return uuid.uuid4().hex[:16]


def now_ms() -> int:
    """Wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)
