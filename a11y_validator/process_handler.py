"""
Exit status policy for a finished run
"""

from typing import Optional
import logging

logger = logging.getLogger(__name__)


class ProcessHandler:
    """
    Decides the exit status from the number of failed cases.

    The default policy expects no failures; ``max_fails(n)`` accepts
    strictly fewer than ``n``.
    """

    def __init__(self):
        self.max_allowed: Optional[int] = None

    def max_fails(self, limit: int) -> "ProcessHandler":
        if limit < 0:
            raise ValueError(f"Maximum number of errors must not be negative, got {limit}")
        self.max_allowed = limit
        return self

    def no_fails(self) -> "ProcessHandler":
        self.max_allowed = None
        return self

    def assert_results(self, fails: int, passes: int) -> int:
        """
        Args:
            fails: Number of failed cases
            passes: Number of passed cases

        Returns:
            Process exit status: 0 on pass, 1 on fail
        """
        if self.max_allowed is None:
            if fails > 0:
                logger.error(f"Failed tests: {fails}")
                logger.info(f"Passed tests: {passes}")
                return 1
        elif fails >= self.max_allowed:
            logger.error(f"Expected fewer than {self.max_allowed} errors. Actual: {fails}")
            return 1

        logger.info(f"Passed tests: {passes}, failed tests: {fails}")
        return 0
