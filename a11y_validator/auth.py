"""
Loads and runs user supplied authentication handlers

A handler module exposes ``handle_authentication(session, auth_options)`` (or the
camel-case ``handleAuthentication``). Example definition::

    links:
      - link: https://example.com/private
        options:
          auth:
            handler: ./my_auth_handler.py
            user: test
"""

import importlib
import importlib.util
import inspect
from pathlib import Path
from types import ModuleType
from typing import Callable
import logging

from a11y_validator.errors import MissingAuthHandler
from a11y_validator.models import AuthOptions

logger = logging.getLogger(__name__)

ENTRY_POINTS = ('handle_authentication', 'handleAuthentication')


class AuthenticationDelegate:
    """Resolves the handler, navigates to the page, then hands over to the handler"""

    def resolve(self, auth: AuthOptions) -> Callable:
        if not auth.handler:
            raise MissingAuthHandler("No authentication handler is set.")

        module = self._load_module(auth)
        for name in ENTRY_POINTS:
            handler = getattr(module, name, None)
            if callable(handler):
                return handler
        raise MissingAuthHandler(
            f"Authentication handler {auth.handler} does not define handle_authentication(session, options)"
        )

    def _load_module(self, auth: AuthOptions) -> ModuleType:
        handler = auth.handler
        looks_like_path = handler.endswith('.py') or '/' in handler or '\\' in handler
        if not looks_like_path:
            try:
                return importlib.import_module(handler)
            except ImportError as e:
                raise MissingAuthHandler(f"Cannot find authentication handler {handler}") from e

        path = Path(handler)
        if not path.is_absolute():
            path = Path(auth.base_dir or '.') / path
        if path.suffix != '.py':
            path = path.with_suffix('.py')
        path = path.resolve()
        logger.info(f"Resolved authentication handler path: {path}")

        if not path.exists():
            raise MissingAuthHandler(f"Cannot find authentication handler {handler} ({path})")
        spec = importlib.util.spec_from_file_location(f"a11y_auth_{path.stem}", path)
        if spec is None or spec.loader is None:
            raise MissingAuthHandler(f"Cannot load authentication handler {path}")
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            raise MissingAuthHandler(f"Authentication handler {path} failed to load: {e}") from e
        return module

    async def authenticate(self, session, auth: AuthOptions, page_link: str):
        """
        Authenticate a page

        Args:
            session: Browser session for the page
            auth: The 'auth' options from the definition file
            page_link: Page to open before the handler runs
        """
        handler = self.resolve(auth)
        logger.debug(f"Authentication handler loaded: {handler}")

        await session.navigate(page_link)

        outcome = handler(session, auth.as_dict())
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome
