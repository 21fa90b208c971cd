"""Logging utilities for Loopsmith."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog
from structlog.typing import Processor


@dataclass
class ProcessingStats:
    """Statistics from a processing run."""

    fragments_read: int = 0
    fragments_rejected: int = 0
    degenerate_count: int = 0
    loops_assembled: int = 0
    incomplete_loops: int = 0
    outlines_composed: int = 0
    holes_subtracted: int = 0
    holes_skipped: int = 0
    offsets_created: int = 0
    offsets_missing: int = 0
    fills_created: int = 0
    error_count: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


_OWNED_HANDLER = "_loopsmith_owned"


def _shared_processors() -> list[Processor]:
    return [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _formatter(
    renderer: Processor,
    shared: list[Processor],
) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    The log file receives one JSON object per event; the console gets
    plain key=value lines. Calling this again replaces the handlers
    installed by the previous call.

    Args:
        log_file: Path to log file (auto-generated if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    if log_file is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = Path(f"loopsmith_{timestamp}.log")

    shared = _shared_processors()

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(getattr(logging, file_level.upper()))
    file_handler.setFormatter(_formatter(structlog.processors.JSONRenderer(), shared))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(_formatter(structlog.dev.ConsoleRenderer(colors=False), shared))

    root_logger = logging.getLogger()
    for handler in [h for h in root_logger.handlers if getattr(h, _OWNED_HANDLER, False)]:
        root_logger.removeHandler(handler)
        handler.close()
    for handler in (file_handler, console_handler):
        setattr(handler, _OWNED_HANDLER, True)
        root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("loopsmith")
    logger.info("Logging initialized", log_file=str(log_file), level=file_level)

    return logger


class ProcessingLogger:
    """Logger for tracking processing progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_drawing_loaded(self, path: str, fragments: int, rejected: int) -> None:
        """Log fragments read from a drawing."""
        self._logger.info("Drawing loaded", path=path, fragments=fragments, rejected=rejected)
        self._stats.fragments_read += fragments
        self._stats.fragments_rejected += rejected

    def log_assembly(self, loops: int, incomplete: int, degenerate: int) -> None:
        """Log loop assembly results."""
        self._logger.info(
            "Loops assembled",
            loops=loops,
            incomplete=incomplete,
            degenerate=degenerate,
        )
        self._stats.loops_assembled += loops
        self._stats.incomplete_loops += incomplete
        self._stats.degenerate_count += degenerate

    def log_composition(self, outer_order: int, subtracted: int, skipped: int, area: float) -> None:
        """Log one composed outline."""
        self._logger.info(
            "Outline composed",
            outer=outer_order,
            holes=subtracted,
            skipped=skipped,
            area=round(area, 6),
        )
        self._stats.outlines_composed += 1
        self._stats.holes_subtracted += subtracted
        self._stats.holes_skipped += skipped

    def log_offsets(self, created: int, missing: list[str]) -> None:
        """Log ordered offset results."""
        self._logger.info("Offsets created", created=created, missing=len(missing))
        for reason in missing:
            self._logger.warning("Offset missing", reason=reason)
        self._stats.offsets_created += created
        self._stats.offsets_missing += len(missing)

    def log_fills(self, count: int) -> None:
        """Log fills handed to the sink."""
        self._logger.debug("Fills created", count=count)
        self._stats.fills_created += count

    def log_error(
        self,
        subject: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log a processing error."""
        self._logger.error(
            "Processing failed",
            subject=subject,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((subject, str(error)))

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
