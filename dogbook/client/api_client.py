# dogbook/client/api_client.py
import logging
from typing import Optional, Dict, Any, List, BinaryIO, Tuple

import requests

from dogbook.core.exceptions import AuthError, error_from_response
from dogbook.models.dog import ABSENT
from dogbook.models.post import LikeToggleResult
from dogbook.utils.datetime_utils import DateTimeUtils
from .session import ApiSession

logger = logging.getLogger(__name__)

_TIMESTAMP_KEYS = ('createdAt', 'updatedAt')


def _with_datetimes(item: Dict[str, Any]) -> Dict[str, Any]:
    """Copies a dog or post body with its ISO timestamps parsed into UTC datetimes."""
    parsed = dict(item)
    for key in _TIMESTAMP_KEYS:
        if parsed.get(key):
            parsed[key] = DateTimeUtils.parse_iso_datetime(parsed[key])
    return parsed


class DogbookClient:
    """
    HTTP client for the Dogbook API.

    Every call takes the ApiSession to act as. Error responses are raised as
    the same exception kinds the server uses (NotFoundError, AuthError, ...).
    """

    def __init__(self, http=None, timeout: float = 10.0):
        # Anything with requests.Session's request() signature works.
        self.http = http or requests.Session()
        self.timeout = timeout

    def _request(self, session: ApiSession, method: str, path: str, *, auth: bool = True, **kwargs) -> Any:
        if auth and not session.is_authenticated:
            raise AuthError("Not logged in", error_code="TOKEN_MISSING")

        response = self.http.request(
            method,
            session.url(path),
            headers=session.auth_headers(),
            timeout=self.timeout,
            **kwargs
        )
        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            logger.info(f"{method} {path} failed with {response.status_code}")
            raise error_from_response(response.status_code, body if isinstance(body, dict) else None)
        return body

    # --- auth ---
    def register(self, session: ApiSession, email: str, password: str) -> ApiSession:
        body = self._request(session, 'POST', '/auth/register', auth=False,
                             json={"email": email, "password": password})
        return session.authenticated(body['token'], body['user'])

    def login(self, session: ApiSession, email: str, password: str) -> ApiSession:
        body = self._request(session, 'POST', '/auth/login', auth=False,
                             json={"email": email, "password": password})
        return session.authenticated(body['token'], body['user'])

    # --- dogs ---
    def create_dog(self, session: ApiSession, name: str, breed: Optional[str] = None,
                   age: Optional[int] = None, avatar: Optional[str] = None) -> Dict[str, Any]:
        payload = {"name": name, "breed": breed, "age": age, "avatar": avatar}
        return _with_datetimes(self._request(session, 'POST', '/dogs',
                                             json={k: v for k, v in payload.items() if v is not None}))

    def get_my_dog(self, session: ApiSession) -> Dict[str, Any]:
        """Raises NotFoundError when the user has not created a profile yet."""
        return _with_datetimes(self._request(session, 'GET', '/dogs/me'))

    def update_my_dog(self, session: ApiSession, *, name=ABSENT, breed=ABSENT, age=ABSENT, avatar=ABSENT,
                      avatar_file: Optional[Tuple[str, BinaryIO, str]] = None) -> Dict[str, Any]:
        """
        Sends only the fields that were passed. ``avatar=None`` clears the
        avatar; ``avatar_file=(filename, fileobj, content_type)`` uploads one.
        """
        fields = {k: v for k, v in dict(name=name, breed=breed, age=age, avatar=avatar).items() if v is not ABSENT}
        if avatar_file is None:
            return _with_datetimes(self._request(session, 'PUT', '/dogs/me', json=fields))

        form = {k: '' if v is None else str(v) for k, v in fields.items() if k != 'avatar'}
        return _with_datetimes(self._request(session, 'PUT', '/dogs/me', data=form, files={'avatar': avatar_file}))

    # --- posts ---
    def list_posts(self, session: ApiSession) -> List[Dict[str, Any]]:
        """Feed items, newest first, with createdAt / updatedAt as datetimes."""
        return [_with_datetimes(item) for item in self._request(session, 'GET', '/posts', auth=False)]

    def create_post(self, session: ApiSession, dog_id: str, content: str, image: Optional[str] = None) -> Dict[str, Any]:
        payload = {"content": content, "dog": dog_id}
        if image:
            payload["image"] = image
        return _with_datetimes(self._request(session, 'POST', '/posts', json=payload))

    def toggle_like(self, session: ApiSession, post_id: str) -> LikeToggleResult:
        body = self._request(session, 'POST', f'/posts/{post_id}/like')
        return LikeToggleResult(
            post_id=body['postId'],
            likes_count=body['likesCount'],
            liked_by_user=body['likedByUser'],
        )
