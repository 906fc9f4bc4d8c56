"""
Exception hierarchy for the validator
"""

from typing import List, Optional


class ValidatorError(Exception):
    """Base class for all validator errors"""


class ConfigurationError(ValidatorError):
    """Malformed definition, option or configuration value"""


class MalformedStepError(ConfigurationError):
    """A command step that is not exactly one supported command"""


class ElementNotFound(ValidatorError):
    """No element matched a selector"""

    kind = "ElementNotFound"

    def __init__(self, selector: str, timeout_ms: Optional[int] = None, message: Optional[str] = None):
        self.selector = selector
        self.timeout_ms = timeout_ms
        super().__init__(message or f"No element found for selector [{selector}]")


class ElementWaitTimeout(ElementNotFound):
    """Waiting for a selector exceeded its timeout"""

    kind = "ElementWaitTimeout"

    def __init__(self, selector: str, timeout_ms: Optional[int] = None, message: Optional[str] = None):
        super().__init__(
            selector,
            timeout_ms,
            message or f"Timed out after {timeout_ms}ms waiting for selector [{selector}]",
        )


class NavigationError(ValidatorError):
    """A page failed to load"""


class AuthenticationError(ValidatorError):
    """Authentication delegate failed"""


class MissingAuthHandler(AuthenticationError):
    """Authentication handler could not be resolved"""


class ScanInvocationError(ValidatorError):
    """The accessibility engine could not be injected or run"""


class SessionTeardownError(ValidatorError):
    """One or more sessions failed to quit"""

    def __init__(self, errors: List[BaseException]):
        self.errors = list(errors)
        details = "; ".join(str(e) for e in self.errors)
        super().__init__(f"{len(self.errors)} browser(s) failed to close: {details}")
