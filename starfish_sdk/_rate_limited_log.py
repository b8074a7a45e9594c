"""
Thread-safe rate-limited logging.

Warnings that repeat on every transaction (gas estimation fallbacks,
unrecognized chain ids) are logged once per interval instead of on every call.
"""
import logging
import threading
from typing import Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

# Keys expire after the interval, so a message is logged at most once per interval
DEFAULT_INTERVAL = 60

_log_caches = {}
_log_caches_lock = threading.RLock()


def _get_cache(interval: int) -> TTLCache:
    cache = _log_caches.get(interval)
    if cache is None:
        cache = TTLCache(maxsize=100, ttl=interval)
        _log_caches[interval] = cache
    return cache


def rate_limited_log(
    message: str,
    level: str = "warning",
    interval: int = DEFAULT_INTERVAL,
    logger_instance: Optional[logging.Logger] = None
) -> bool:
    """
    Log a message with rate limiting, in a thread-safe manner.

    Args:
        message: Message to log
        level: Log level (debug, info, warning, error, critical)
        interval: Minimum interval between identical logs in seconds
        logger_instance: Logger to use (defaults to module logger)

    Returns:
        True if the message was logged, False if it was suppressed
    """
    log_instance = logger_instance or logger
    log_method = getattr(log_instance, level.lower(), log_instance.warning)
    key = f"{level}:{message}"

    with _log_caches_lock:
        cache = _get_cache(interval)
        if key in cache:
            return False
        log_method(message)
        cache[key] = True
    return True


def reset_rate_limited_log() -> None:
    """Forget every logged message (for testing)"""
    with _log_caches_lock:
        _log_caches.clear()
