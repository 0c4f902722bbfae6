import random
import time
from typing import Callable, Optional

RANDOM_UPPER_BOUND = 10**9
MAX_ATTEMPTS = 5


def generate(prefix: str, suffix: str = ".jpg") -> str:
    """``<prefix>-<epoch millis>-<random int>`` plus suffix."""
    return f"{prefix}-{int(time.time() * 1000)}-{random.randint(0, RANDOM_UPPER_BOUND)}{suffix}"


def generate_unique(prefix: str, exists: Callable[[str], bool], suffix: str = ".jpg") -> str:
    """Draw names until ``exists`` reports a free one."""
    candidate: Optional[str] = None
    for _ in range(MAX_ATTEMPTS):
        candidate = generate(prefix, suffix)
        if not exists(candidate):
            return candidate
    raise RuntimeError(f"Could not allocate a unique filename after {MAX_ATTEMPTS} attempts (last: {candidate})")
