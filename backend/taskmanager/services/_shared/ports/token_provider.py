from __future__ import annotations

from typing import Any, Protocol

ACCESS = "access"
REFRESH = "refresh"


class TokenProvider(Protocol):
    """
    Port for issuing and verifying the two token classes.

    Access and refresh tokens are signed with independent secrets, so a
    token of one class never verifies as the other.
    """

    def issue_access(self, user_id: int, role: str) -> str: ...

    def issue_refresh(self, user_id: int) -> str: ...

    def verify(
        self,
        token: str,
        expected_type: str,
        *,
        secret: str | None = None,
    ) -> dict[str, Any]:
        """
        Decode ``token`` with the secret of ``expected_type``, or with
        ``secret`` when one is given.

        :raises ExpiredTokenError: When ``exp`` has passed.
        :raises InvalidTokenError: On any other failure.
        """
        ...
