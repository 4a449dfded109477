"""
Explicit auth session for client calls
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthSession:
    """Signed-in user as seen by the client.

    ``id_token`` is the identity provider's ID token; it is sent as the
    bearer credential on requests that need a verified caller.
    """
    email: str
    id_token: str

    @property
    def authorization_header(self) -> dict:
        return {"Authorization": f"Bearer {self.id_token}"}
