"""
AuthSession - Auth token and user object for the current learner.

The token and user are kept in a small JSON file (or only in memory) so
that the player can gate authenticated actions. Clearing the session is how
a forced logout happens.
"""

import json
import logging
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)


class AuthSession:
    """
    Holds the bearer token and the signed-in user.

    When `path` is None nothing is written to disk.
    """

    def __init__(self, path: Optional[Path] = None, token: Optional[str] = None, user: Optional[dict] = None):
        self.path = path
        self.token = token
        self.user = user
        if path is not None and token is None:
            self._load()

    def _load(self):
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return
        self.token = data.get("authToken")
        self.user = data.get("user")

    def _save(self):
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({"authToken": self.token, "user": self.user}, ensure_ascii=False),
            encoding="utf-8",
        )

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def is_suspended(self) -> bool:
        return bool(self.user) and self.user.get("accountStatus") == "suspended"

    def sign_in(self, token: str, user: Optional[dict] = None):
        """Store a token (and user) obtained elsewhere."""
        self.token = token
        self.user = user
        self._save()

    def clear(self):
        """Forget the token and user (logout)."""
        self.token = None
        self.user = None
        if self.path is not None and self.path.exists():
            self.path.unlink()
        logger.info("Session cleared")
