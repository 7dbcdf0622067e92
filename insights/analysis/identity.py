"""
User identity extraction from the `user` session cookie.

The cookie is issued by the login subsystem and holds a JSON object such as
`{"id": 7, "nome": "..."}`. Nothing here validates it against a session store;
an absent or unreadable cookie degrades to the anonymous user.
"""
import json
import re
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import unquote

from ..utils import get_logger

logger = get_logger(__name__)

ANONYMOUS_USER_ID = 0
USER_ID_PATTERN = re.compile(r"-?\d+", re.ASCII)
USER_COOKIE_NAME = "user"


@dataclass(frozen=True)
class UserIdentity:
    """Outcome of reading the session cookie."""
    user_id: int
    authenticated: bool
    reason: Optional[str] = None

    @classmethod
    def anonymous(cls, reason: str) -> "UserIdentity":
        return cls(user_id=ANONYMOUS_USER_ID, authenticated=False, reason=reason)


def _coerce_user_id(value: Any) -> Optional[int]:
    # bool is an int subclass; `true` is not a user id
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and USER_ID_PATTERN.fullmatch(value.strip()):
        return int(value.strip())
    return None


def parse_user_cookie(raw: Optional[str]) -> UserIdentity:
    """
    Parse the raw `user` cookie value into a UserIdentity.

    Args:
        raw: Cookie value as received, possibly URL-encoded, or None

    Returns:
        UserIdentity; anonymous (user_id 0) with a reason when the cookie is
        missing or unusable. Never raises.
    """
    if not raw:
        return UserIdentity.anonymous("cookie absent")

    text = raw
    if not text.lstrip().startswith("{"):
        text = unquote(text)

    try:
        data = json.loads(text)
    except ValueError as e:
        logger.warning(f"Invalid user cookie, using anonymous identity: {e}")
        return UserIdentity.anonymous("cookie is not valid JSON")

    if not isinstance(data, dict):
        logger.warning("User cookie is not a JSON object, using anonymous identity")
        return UserIdentity.anonymous("cookie is not a JSON object")

    user_id = _coerce_user_id(data.get("id"))
    if user_id is None:
        logger.warning("User cookie has no usable id, using anonymous identity")
        return UserIdentity.anonymous("cookie has no integer id")

    return UserIdentity(user_id=user_id, authenticated=True)
