import logging
import os
import time
from functools import wraps
from typing import Callable, Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def setup_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Sets up a logger with the service format.
    Level defaults to WATTZUP_LOG_LEVEL, then INFO.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        if level is None:
            level = os.getenv("WATTZUP_LOG_LEVEL", "INFO")
        if isinstance(level, str):
            level = getattr(logging, level.upper(), logging.INFO)
        logger.setLevel(level)
    return logger

def log_execution_time(logger: logging.Logger, slow_threshold_s: float = 0.5):
    """
    Decorator that times repository reads.
    Slow calls are logged as warnings, failures as errors before re-raising.
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"{func.__qualname__} failed: {e}", exc_info=True)
                raise
            elapsed = time.perf_counter() - start
            if elapsed > slow_threshold_s:
                logger.warning(f"{func.__qualname__} took {elapsed:.3f}s")
            elif logger.isEnabledFor(logging.DEBUG):
                logger.debug(f"{func.__qualname__} executed in {elapsed:.3f}s")
            return result
        return wrapper
    return decorator
