"""
Sign-in flow
============
Submitting the sign-in form asks the auth service to email a magic link.
The flow exposes `busy` and `message` for the page to render and never
raises: failures become a generic message and are logged.
"""
import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from kharcha.core.logging_config import logger

SUCCESS_MESSAGE = "Check your email for the sign-in link!"
FAILURE_MESSAGE = "Failed to send sign-in link. Please try again."
SIGN_IN_PROVIDER = "resend"


@dataclass
class SignInResult:
    """`signing_in` is True when a previous link for the address was still valid"""
    signing_in: bool


SignInAction = Callable[[str, Dict[str, Any]], Awaitable[SignInResult]]


class SignInFlow:

    def __init__(self, action: SignInAction, provider: str = SIGN_IN_PROVIDER):
        self.action = action
        self.provider = provider
        self.busy = False
        self.message = ""

    async def submit(self, email: str, cancel: Optional[asyncio.Event] = None) -> None:
        # A submit while one is in flight is dropped
        if self.busy:
            logger.debug("Sign-in already in progress, ignoring submit")
            return

        self.busy = True
        self.message = ""
        try:
            await self.action(self.provider, {"email": email})
            if cancel is not None and cancel.is_set():
                return
            self.message = SUCCESS_MESSAGE
        except Exception as e:
            if cancel is not None and cancel.is_set():
                return
            logger.log_error_with_context(e, context="sign_in", email=email)
            self.message = FAILURE_MESSAGE
        finally:
            self.busy = False


class SignInFlowRegistry:
    """One flow per email address, so concurrent submits for the same address collapse"""

    def __init__(self):
        self._flows: Dict[str, SignInFlow] = {}

    def flow_for(self, email: str, action: SignInAction) -> SignInFlow:
        key = email.strip().lower()
        flow = self._flows.get(key)
        if flow is not None and flow.busy:
            return flow

        flow = SignInFlow(action)
        self._flows[key] = flow
        return flow

    def release(self, email: str, flow: SignInFlow) -> None:
        """Forget a finished flow"""
        key = email.strip().lower()
        if self._flows.get(key) is flow and not flow.busy:
            del self._flows[key]

    def __len__(self) -> int:
        return len(self._flows)
