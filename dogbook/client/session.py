# dogbook/client/session.py
from dataclasses import dataclass, replace
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class ApiSession:
    """
    Everything a caller needs to talk to the API as one user.

    Sessions are immutable values owned by the caller; logging in returns a
    new session instead of changing shared state.
    """
    base_url: str
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def user_id(self) -> Optional[str]:
        return (self.user or {}).get('userId')

    def authenticated(self, token: str, user: Dict[str, Any]) -> "ApiSession":
        return replace(self, token=token, user=user)

    def url(self, path: str) -> str:
        return self.base_url.rstrip('/') + '/' + path.lstrip('/')

    def auth_headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
