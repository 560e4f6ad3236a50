"""
User storage service with JSON-based persistence.
Handles credential lookups and updates, and creates the default admin user on
first run.
"""

import json
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from studio_cms.auth.passwords import DEFAULT_ROUNDS, hash_password
from studio_cms.models.user import User
from studio_cms.utils.exceptions import ConfigError, UserNotFoundError
from studio_cms.utils.files import atomic_write_text, ensure_directory
from studio_cms.utils.logger import get_logger
from studio_cms.utils.timestamps import utc_now_iso

logger = get_logger(__name__)


class UserStore:
    """Credential store backed by a single ``{"users": [...]}`` JSON file"""

    def __init__(self, users_path: Path, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.users_path = Path(users_path)
        self.bcrypt_rounds = bcrypt_rounds
        self._lock = threading.Lock()
        ensure_directory(self.users_path.parent)

    def ensure_default_admin(self, username: str, password: str, email: Optional[str] = None) -> Optional[User]:
        """Create the id=1 admin when the store is absent or empty; returns it if created"""
        with self._lock:
            if self._read_users():
                return None
            admin_user = User(
                id=1,
                username=username,
                email=email,
                password_hash=hash_password(password, rounds=self.bcrypt_rounds),
                role="admin",
                created_at=utc_now_iso(),
            )
            self._write_users([admin_user])
        logger.info("Default admin user created", username=username)
        return admin_user

    def load_users(self) -> List[User]:
        """Load all users from storage"""
        with self._lock:
            return self._read_users()

    def find_by_login(self, login: str) -> Optional[User]:
        """Find user by username or email"""
        if not login:
            return None
        for user in self.load_users():
            if user.username == login or (user.email and user.email == login):
                return user
        return None

    def find_by_id(self, user_id: int) -> Optional[User]:
        """Find user by ID"""
        for user in self.load_users():
            if user.id == user_id:
                return user
        return None

    def update_user(self, user_id: int, **updates: Any) -> User:
        """Update user fields (snake_case names) and persist"""
        with self._lock:
            users = self._read_users()
            for i, user in enumerate(users):
                if user.id == user_id:
                    updated_user = user.model_copy(update=updates)
                    users[i] = User.model_validate(updated_user.model_dump())
                    self._write_users(users)
                    return users[i]
        raise UserNotFoundError(f"User {user_id} not found")

    def record_login(self, user_id: int) -> User:
        return self.update_user(user_id, last_login=utc_now_iso())

    def change_password(self, user_id: int, password_hash: str) -> User:
        user = self.update_user(user_id, password_hash=password_hash, updated_at=utc_now_iso())
        logger.info("Password changed", user_id=user_id, username=user.username)
        return user

    def _read_users(self) -> List[User]:
        if not self.users_path.exists():
            return []
        try:
            with open(self.users_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            records = data if isinstance(data, list) else data.get("users", [])
            return [User.model_validate(record) for record in records]
        except (OSError, json.JSONDecodeError, AttributeError, ValueError) as e:
            raise ConfigError(f"Failed to load users from {self.users_path}: {str(e)}")

    def _write_users(self, users: List[User]) -> None:
        users_data: Dict[str, Any] = {"users": [user.to_record() for user in users]}
        try:
            atomic_write_text(self.users_path, json.dumps(users_data, indent=2, ensure_ascii=False))
        except OSError as e:
            raise ConfigError(f"Failed to save users to {self.users_path}: {str(e)}")
