"""
Grading logger with verbosity levels, timing and per-call metrics.
"""
import time
import logging
from typing import Optional, Dict, Any
from enum import Enum
from contextlib import contextmanager

logger = logging.getLogger(__name__)

RAW_PREVIEW_CHARS = 500


class LogLevel(Enum):
    """Log verbosity levels."""
    MINIMAL = "minimal"      # Only critical events and errors
    STANDARD = "standard"    # Key milestones and warnings
    VERBOSE = "verbose"      # Everything (debugging)


class PerformanceTimer:
    """Track operation timing and emit warnings for slow operations."""

    def __init__(self, operation: str, warn_threshold_ms: float = 3000):
        self.operation = operation
        self.warn_threshold_ms = warn_threshold_ms
        self.start_time = None
        self.end_time = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.time()
        return False

    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time) * 1000
        elif self.start_time:
            return (time.time() - self.start_time) * 1000
        return 0


class GradingLogger:
    """Logger for one grading pipeline, with context and metrics."""

    def __init__(self, name: str, level: LogLevel = LogLevel.STANDARD, verbose: bool = False):
        self.name = name
        # If verbose is True, override level to VERBOSE
        self.level = LogLevel.VERBOSE if verbose else level
        self.metrics: Dict[str, Any] = {}
        self.timers: Dict[str, PerformanceTimer] = {}

    def _should_log(self, required_level: LogLevel) -> bool:
        hierarchy = {
            LogLevel.MINIMAL: 0,
            LogLevel.STANDARD: 1,
            LogLevel.VERBOSE: 2
        }
        return hierarchy[self.level] >= hierarchy[required_level]

    def debug(self, message: str):
        if self._should_log(LogLevel.VERBOSE):
            logger.debug(f"[{self.name}] {message}")

    def warning(self, message: str, level: LogLevel = LogLevel.MINIMAL):
        if self._should_log(level):
            logger.warning(f"[{self.name}] ⚠️ {message}")

    def error(self, message: str, exc: Optional[BaseException] = None):
        """Log error (always shown)."""
        if exc:
            logger.error(f"[{self.name}] ❌ {message}: {exc}")
        else:
            logger.error(f"[{self.name}] ❌ {message}")

    def phase(self, message: str):
        if self._should_log(LogLevel.STANDARD):
            logger.info(f"[{self.name}] 🔄 {message}")

    def success(self, message: str):
        if self._should_log(LogLevel.STANDARD):
            logger.info(f"[{self.name}] ✅ {message}")

    def metric(self, key: str, value: Any):
        """Record a metric."""
        self.metrics[key] = value
        self.debug(f"📊 {key}: {value}")

    @contextmanager
    def timer(self, operation: str, warn_threshold_ms: float = 3000):
        """Time an operation and warn if slow."""
        timer = PerformanceTimer(operation, warn_threshold_ms)
        self.timers[operation] = timer

        try:
            with timer:
                yield timer
        finally:
            duration_ms = timer.elapsed_ms()
            if duration_ms > warn_threshold_ms:
                self.warning(f"{operation} took {duration_ms:.0f}ms", LogLevel.STANDARD)
            else:
                self.debug(f"{operation} completed in {duration_ms:.0f}ms")

    def raw_output(self, raw_text: str, reason: str):
        """Keep a preview of upstream output that could not be parsed."""
        preview = raw_text[:RAW_PREVIEW_CHARS] + "..." if len(raw_text) > RAW_PREVIEW_CHARS else raw_text
        logger.warning(
            f"[{self.name}] Unparseable generation output ({reason}, {len(raw_text)} chars):\n{preview}"
        )

    def grade_decision(self, overall_score: int, grade: str, category: str, adjusted: Dict[str, int]):
        """Log the derived grade with context."""
        self.debug(f"Grade {grade} ({overall_score}/100, category: {category}, adjusted sub-scores: {adjusted})")

        if grade == "F":
            self.warning(f"Failing grade ({overall_score}/100) from a successful grading call", LogLevel.VERBOSE)

    def get_summary(self) -> str:
        """Get summary of logged metrics."""
        lines = [f"\n{'='*60}", f"Grading Metrics: {self.name}", f"{'='*60}"]

        for key, value in self.metrics.items():
            lines.append(f"  {key}: {value}")

        if self.timers:
            lines.append("\nOperation Timings:")
            for op, timer in self.timers.items():
                lines.append(f"  {op}: {timer.elapsed_ms():.0f}ms")

        lines.append("=" * 60)
        return "\n".join(lines)


def create_logger(name: str, level: LogLevel = LogLevel.STANDARD,
                  verbose: bool = False) -> GradingLogger:
    """Factory function to create a GradingLogger."""
    return GradingLogger(name, level, verbose)
