"""Utility modules for answer grading."""
from .logger import GradingLogger, LogLevel, create_logger, PerformanceTimer

__all__ = [
    'GradingLogger',
    'LogLevel',
    'create_logger',
    'PerformanceTimer'
]
