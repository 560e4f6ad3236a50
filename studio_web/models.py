"""API request models"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LoginRequest(BaseModel):
    """Request model for login; ``username`` may also be the account email"""
    username: Optional[str] = None
    password: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    """Request model for changing the caller's password"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_password: Optional[str] = None
    new_password: Optional[str] = Field(default=None, description="At least min_password_length characters")
