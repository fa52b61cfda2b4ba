"""One-way password hashing backed by werkzeug.security."""
from werkzeug.security import check_password_hash, generate_password_hash


class PasswordHasher:
    """Hashes raw passwords and checks them against stored hashes."""

    def __init__(self, method: str = "scrypt"):
        self.method = method

    def hash(self, raw_password: str) -> str:
        return generate_password_hash(raw_password, method=self.method)

    def verify(self, password_hash: str, raw_password: str) -> bool:
        return check_password_hash(password_hash, raw_password)


password_hasher = PasswordHasher()
