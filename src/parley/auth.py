"""
Credential helpers: the server only ever sees a password hash.
"""

import hashlib

from parley.models.message import LoginData


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def login_data(username: str, password: str) -> LoginData:
    """Build the /login and /register payload."""
    return LoginData(username=username, password_hash=hash_password(password))
