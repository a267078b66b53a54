"""
Logging configuration for SkillChart.

Uses loguru for structured logging with rotation and retention.
"""

import sys
import time

from loguru import logger

from skillchart.config.settings import SkillChartSettings


def setup_logging(settings: SkillChartSettings) -> None:
    """Configure logging based on settings.

    Sets up:
    - Console output with color and formatting
    - File output with rotation and retention
    - Log levels from configuration

    Should be called once at application startup.
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        colorize=True,
    )

    if settings.log_to_file:
        log_dir = settings.logs_dir
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "skillchart_{time:YYYY-MM-DD}.log",
            level="DEBUG",  # Always log everything to file
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation=settings.log_rotation,
            retention=settings.log_retention,
            compression="gz",
        )

    logger.debug("Logging initialized (level={})", settings.log_level)


def get_logger(name: str):
    """Get a logger bound to a module name.

    Example:
        >>> from skillchart.core.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Creating spreadsheet: {}", name)
    """
    return logger.bind(module=name)


class log_operation:
    """Context manager logging an operation with timing.

    Example:
        >>> with log_operation("Exporting PDF", name="ACME Taro"):
        ...     exporter.export(folder_id, outcome)
        # Logs: "Exporting PDF [name=ACME Taro] completed in 2.34s"
    """

    def __init__(self, operation: str, **context):
        self.operation = operation
        self.context = context
        self.start_time = None

    def _context_str(self) -> str:
        return " ".join(f"{k}={v}" for k, v in self.context.items())

    def __enter__(self):
        self.start_time = time.time()
        logger.debug("{} [{}] starting...", self.operation, self._context_str())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time

        if exc_type is None:
            logger.info(
                "{} [{}] completed in {:.2f}s",
                self.operation,
                self._context_str(),
                duration,
            )
        else:
            logger.error(
                "{} [{}] failed after {:.2f}s: {}",
                self.operation,
                self._context_str(),
                duration,
                exc_val,
            )

        return False  # Don't suppress exceptions
