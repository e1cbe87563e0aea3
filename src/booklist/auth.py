"""Password gate for mutating operations.

``PasswordAuthorizer`` asks the operator for a password through an
injected prompt and validates it against the book store. The synchronizer
only sees an async callable returning ``bool``, so the TUI modal and the
CLI prompt can both drive it.
"""

from typing import Awaitable, Callable, Optional

import structlog

from .remote import BookStoreError

log = structlog.get_logger()

PASSWORD_CHECK_ERROR = "Error checking password."


class PasswordAuthorizer:
    """Async callable that returns ``True`` when the operator is authorized.

    Parameters
    ----------
    store : BookStoreClient
        Client used for ``POST /check-password``.
    prompt : callable
        Async callable returning the entered password, or ``None``/``""``
        when the operator cancels.
    report : callable, optional
        Called with a message when the password check itself fails.
    """

    def __init__(
        self,
        store,
        prompt: Callable[[], Awaitable[Optional[str]]],
        report: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._store = store
        self._prompt = prompt
        self._report = report

    async def __call__(self) -> bool:
        password = await self._prompt()
        if not password:
            log.debug("password_prompt_cancelled")
            return False
        try:
            valid = await self._store.check_password(password)
        except BookStoreError as e:
            log.warning("password_check_failed", error=str(e))
            if self._report is not None:
                self._report(PASSWORD_CHECK_ERROR)
            return False
        if not valid:
            log.info("password_rejected")
        return valid
