"""Logging utilities for the Planet Generator server."""

from .request_log import LOG_FORMAT, configure_logging, request_logger

__all__ = ["LOG_FORMAT", "configure_logging", "request_logger"]
