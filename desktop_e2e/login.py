"""Log a server view in with the configured test account."""

import logging
from typing import Any, Optional

from .errors import SetupFailure
from .readiness import ElementCondition, wait_for_element


logger = logging.getLogger(__name__)


LOGIN_ID_INPUT = "#input_loginId"
PASSWORD_INPUT = "#input_password-input"
SUBMIT_BUTTON = "#saveSetting"


async def login(
    window: Any,
    user_name: Optional[str],
    password: Optional[str],
    timeout: float = 10.0,
) -> None:
    """Fill and submit the login form of a server view.

    Raises:
        SetupFailure: If no credentials are configured
        WaitTimeoutError: If the login form never appears
    """
    if not user_name or not password:
        raise SetupFailure(
            "Login credentials missing; set E2E_TEST_USER_NAME and E2E_TEST_PASSWORD",
            step="login",
        )

    await wait_for_element(window, LOGIN_ID_INPUT, ElementCondition.VISIBLE, timeout)
    await window.fill(LOGIN_ID_INPUT, user_name)
    await window.fill(PASSWORD_INPUT, password)
    await window.click(SUBMIT_BUTTON)
    logger.info(f"Submitted login for '{user_name}'")
