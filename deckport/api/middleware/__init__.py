"""API middleware for deckport."""

from deckport.api.middleware.logging import LoggingMiddleware, configure_logging

__all__ = [
    "LoggingMiddleware",
    "configure_logging",
]
