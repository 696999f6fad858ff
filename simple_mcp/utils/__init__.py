"""Utility modules: logging."""

from simple_mcp.utils.logging import ChannelLogger, setup_logging, get_logger

__all__ = [
    "ChannelLogger",
    "setup_logging",
    "get_logger",
]
