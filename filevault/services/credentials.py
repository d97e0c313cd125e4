# filevault/services/credentials.py
import json
import logging
import os
import threading
from typing import Dict, Optional

from werkzeug.security import generate_password_hash

from filevault.errors import AlreadyExists

logger = logging.getLogger(__name__)


class CredentialStore:
    """username -> password hash, kept in a single JSON file.

    The whole mapping is read on every call and written back as a whole.
    The lock only protects writers inside this process.
    """

    def __init__(self, path: str, default_username: str, default_password: str):
        self.path = path
        self.default_username = default_username
        self.default_password = default_password
        self._lock = threading.RLock()

    def load(self) -> Dict[str, str]:
        with self._lock:
            if not os.path.exists(self.path):
                logger.info("Creating credentials file %s with default account %r",
                            self.path, self.default_username)
                self.save({self.default_username: generate_password_hash(self.default_password)})

            with open(self.path, encoding="utf-8") as f:
                return json.load(f)

    def save(self, users: Dict[str, str]) -> None:
        with self._lock:
            tmp_path = f"{self.path}.tmp"
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(users, f, indent=2)
            os.replace(tmp_path, self.path)

    def find_user(self, username: str) -> Optional[str]:
        return self.load().get(username)

    def add_user(self, username: str, password: str) -> str:
        with self._lock:
            users = self.load()
            if username in users:
                raise AlreadyExists("User already exists")

            users[username] = generate_password_hash(password)
            self.save(users)

        logger.info("Registered user %r", username)
        return username
