"""
Logging for Loom.

Every loom.* logger writes DEBUG and up to <log_dir>/loom.log (rotated) and
WARNING and up to stderr, or everything with debug=True. Records use
pipe-separated fields so runs can be grepped by kind:

    SAMPLE | islands.txt | 10x10 | tiles=5
    COLLAPSE | 25x25 | seed=7 | steps=625 | contradictions=3 | 12ms
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


LOG_FILE_NAME = "loom.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5


def setup_logging(log_dir: Path | str, debug: bool = False) -> Path:
    """
    Attach file and console handlers to the "loom" logger.

    Calling it again replaces the handlers instead of adding more.

    Args:
        log_dir: Directory for loom.log (created if missing)
        debug: Also print DEBUG records to stderr

    Returns:
        Path to the log file
    """
    log_path = Path(log_dir) / LOG_FILE_NAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger("loom")
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-24s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    console_handler.setFormatter(logging.Formatter(fmt="%(levelname)-8s | %(message)s"))
    root_logger.addHandler(console_handler)

    root_logger.info(f"LOGGING | {log_path.absolute()} | debug={debug}")
    return log_path


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_sample(
    logger: logging.Logger,
    source: str,
    width: int,
    height: int,
    tiles: int,
) -> None:
    """Log a sample being learned."""
    logger.info(f"SAMPLE | {source} | {width}x{height} | tiles={tiles}")


def log_collapse(
    logger: logging.Logger,
    width: int,
    height: int,
    seed: int,
    steps: int,
    contradictions: int = 0,
    duration_ms: int | None = None,
) -> None:
    """Log a finished collapse run."""
    duration_str = f" | {duration_ms}ms" if duration_ms is not None else ""
    logger.debug(
        f"COLLAPSE | {width}x{height} | seed={seed} | steps={steps} "
        f"| contradictions={contradictions}{duration_str}"
    )


def log_contradiction(
    logger: logging.Logger,
    position: tuple[int, int],
    policy: str,
) -> None:
    """Log a cell whose neighbours allow no common tile."""
    logger.debug(f"CONTRADICTION | ({position[0]}, {position[1]}) | policy={policy}")


def log_generation(
    logger: logging.Logger,
    status: str,
    details: str | None = None,
) -> None:
    """Log a generation request from the entry points."""
    details_str = f" | {details}" if details else ""
    logger.info(f"GENERATE | {status}{details_str}")
