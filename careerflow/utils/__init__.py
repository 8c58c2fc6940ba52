"""
Utility modules for CareerFlow.
"""

from .logger import (
    setup_logging,
    get_logger,
    get_ui_logger,
    CareerFlowLogger,
    StructuredFormatter,
    ColoredConsoleFormatter,
)

__all__ = [
    'setup_logging',
    'get_logger',
    'get_ui_logger',
    'CareerFlowLogger',
    'StructuredFormatter',
    'ColoredConsoleFormatter',
]
