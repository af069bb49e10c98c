"""Loguru sinks for the API process."""
import sys
from pathlib import Path

from loguru import logger

from farmledger.config import Settings


def setup_logging(settings: Settings) -> None:
    """Replace the default handler with stderr and an optional rotating file sink."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        serialize=settings.log_json,
        backtrace=False,
        diagnose=False,
    )
    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(exist_ok=True, parents=True)
        logger.add(
            log_path,
            rotation=settings.log_rotation,
            retention=settings.log_retention,
            enqueue=True,  # safe across uvicorn workers
            backtrace=True,
            diagnose=settings.app_env != "production",
            level=settings.log_level.upper(),
            serialize=settings.log_json,
        )
