"""Ready-made ``on_error`` handlers."""

from __future__ import annotations

from loguru import logger as loguru_logger

from dynframe.current import current_error
from dynframe.types import ErrorHandler

loguru_logger = loguru_logger.bind(component="dynframe")


def log_trace(
    level: str | int = "ERROR",
    *,
    message: str = "Unhandled error in frame",
    reraise: bool = False,
) -> ErrorHandler:
    """Return a handler that logs the frame trace through loguru.

    The in-flight error is attached so loguru renders its traceback. With
    ``reraise`` the error keeps propagating to the next handler outward after
    it has been logged; otherwise logging absorbs it.
    """

    def handler(trace: str) -> None:
        loguru_logger.opt(exception=current_error()).log(level, "{}\n{}", message, trace.rstrip("\n"))
        if reraise:
            raise

    return handler


__all__ = ["log_trace"]
