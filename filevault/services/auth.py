# filevault/services/auth.py
import logging

from werkzeug.security import check_password_hash

from filevault.errors import Unauthorized
from filevault.services.credentials import CredentialStore

logger = logging.getLogger(__name__)


class Authenticator:
    def __init__(self, store: CredentialStore):
        self.store = store

    def register(self, username: str, password: str) -> str:
        # no password or username policy beyond the request schema
        return self.store.add_user(username, password)

    def authenticate(self, username: str, password: str) -> str:
        password_hash = self.store.find_user(username)
        if password_hash is None or not check_password_hash(password_hash, password):
            logger.warning("Failed login for %r", username)
            raise Unauthorized("Invalid credentials")

        return username
