from __future__ import annotations

import logging

from ghclosebot.core.interfaces import PlatformClient
from ghclosebot.core.models import AuthDecision


class AuthorizationGate:
    def __init__(self, client: PlatformClient) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._client = client

    def authorize(self, org: str, repo: str, author: str, commenter: str) -> AuthDecision:
        """Authors may always act on their own items; anyone else needs write access."""
        if commenter == author:
            return AuthDecision(allowed=True, checked=True)

        allowed, succeeded = self._client.check_permission(org, repo, commenter)
        if not succeeded:
            self._logger.warning(
                "Permission check failed",
                extra={"repo": f"{org}/{repo}", "user": commenter},
            )
            return AuthDecision(allowed=False, checked=False)
        return AuthDecision(allowed=allowed, checked=True)
