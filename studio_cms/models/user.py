"""User data models for authentication"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class User(BaseModel):
    """Credential store record; serialized with camelCase keys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int
    username: str
    email: Optional[str] = None
    password_hash: str
    role: Literal["admin", "user"] = "user"
    created_at: str  # ISO format timestamp
    last_login: Optional[str] = None
    updated_at: Optional[str] = None

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)

    def to_public(self) -> dict:
        """Profile fields safe to return to clients"""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "lastLogin": self.last_login,
        }
