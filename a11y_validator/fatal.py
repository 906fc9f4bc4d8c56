"""
Run abort policy: log, close every browser, exit non-zero
"""

from typing import NoReturn, Optional
import logging

from a11y_validator.browser_manager import BrowserManager

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1


class FatalExitHandler:
    """Single place where a run is aborted"""

    def __init__(self, browser_manager: BrowserManager):
        self.browser_manager = browser_manager

    async def fail(self, message: str, error: Optional[BaseException] = None) -> NoReturn:
        """
        Abort the run

        Args:
            message: Human readable description of what failed
            error: Underlying exception, if any

        Raises:
            SystemExit: always, with a non-zero status
        """
        logger.error(message)
        if error is not None:
            logger.error(f"{type(error).__name__}: {error}")

        logger.info(f"Exiting. Closing {len(self.browser_manager.sessions)} browsers")
        try:
            await self.browser_manager.close_all()
        except Exception as e:
            logger.error(f"Error occurred while trying to close browsers: {e}")

        raise SystemExit(EXIT_FAILURE) from error
