#!filepath: position_escrow/utils/logger.py
import os
from functools import wraps
from time import perf_counter
from typing import Callable

from loguru import logger

_LOGGER_CONFIGURED = False


class Logging:
    """
    Package-wide logger
    ---------------------------------------
    - date-rotated file sink
    - retention window
    - decorator that logs failing calls and re-raises
    ---------------------------------------
    """

    def __init__(
        self,
        log_dir: str = "logs",
        rotation: str = "1 day",
        retention: str = "30 days",
        log_level: str = "INFO",
    ):
        self.log_dir = log_dir
        self.rotation = rotation
        self.retention = retention
        self.level = log_level

        os.makedirs(self.log_dir, exist_ok=True)
        self._configure()

    def _configure(self) -> None:
        """
        Replace every sink with a single file sink; idempotent per instance.
        """
        global _LOGGER_CONFIGURED

        logger.remove()

        logger.add(
            sink=f"{self.log_dir}/{{time:YYYY-MM-DD}}.log",
            rotation=self.rotation,
            retention=self.retention,
            level=self.level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
            enqueue=True,
            backtrace=True,
            diagnose=True,
        )

        if not _LOGGER_CONFIGURED:
            logger.info("\n-----------Logger initialized successfully.-----------")
        _LOGGER_CONFIGURED = True

    # ---------- pass-throughs ----------
    def debug(self, msg: str, *args, **kwargs):
        logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        logger.exception(msg, *args, **kwargs)

    # ---------- decorator ----------
    def catch(
        self,
        msg: str = "Exception occurred",
        log_inputs: bool = False,
        log_time: bool = False,
    ) -> Callable:

        def decorator(func: Callable):
            @wraps(func)
            def wrapper(*args, **kwargs):

                if log_inputs:
                    logger.debug(f"[CALL] {func.__name__} args={args[1:]}, kwargs={kwargs}")

                start = perf_counter()

                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    logger.debug(f"[ERROR] {func.__name__}: {msg}: {type(e).__name__}: {e}")
                    raise

                if log_time:
                    cost = perf_counter() - start
                    logger.debug(f"[TIME] {func.__name__} took {cost:.4f}s")

                return result

            return wrapper

        return decorator


def init_logging(cfg) -> Logging:
    """
    Rebind the global `logs` sinks from a LogConfig.
    """
    logs.log_dir = cfg.dir
    logs.rotation = cfg.rotation
    logs.retention = cfg.retention
    logs.level = cfg.level
    os.makedirs(logs.log_dir, exist_ok=True)
    logs._configure()
    return logs


# default global logs (rebound by init_logging)
logs = Logging(
    log_dir=os.getenv("POSITION_ESCROW_LOG_DIR", "logs"),
    log_level=os.getenv("POSITION_ESCROW_LOG_LEVEL", "INFO"),
)
