import hmac
import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class Auth:
    """Resolves bearer API keys to user ids from the users config file.

    File format: {"authorized_users": [{"id": "...", "api_key": "...", "name": "..."}]}
    The file is re-read on every lookup so keys can be rotated without a restart.
    """

    def __init__(self, config_path: str):
        self._path = Path(config_path).expanduser()

    def _load(self) -> list[dict]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return data.get("authorized_users", [])
        except FileNotFoundError:
            logger.warning("Users config %s not found; all requests will be rejected", self._path)
            return []
        except json.JSONDecodeError:
            logger.error("Users config %s is not valid JSON", self._path)
            return []

    def resolve(self, api_key: str) -> Optional[str]:
        """Return the user id owning `api_key`, or None."""
        if not api_key:
            return None
        match = None
        for u in self._load():
            candidate = str(u.get("api_key") or "")
            # compare against every entry so timing does not reveal position
            if candidate and hmac.compare_digest(candidate.encode(), api_key.encode()):
                match = u
        if match is None or not match.get("id"):
            return None
        return str(match["id"])
