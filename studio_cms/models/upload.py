"""Metadata schema for an uploaded image, checked after the transport accepted it"""

from typing import List

from pydantic import BaseModel, Field, ValidationInfo, field_validator

SAFE_FILENAME_PATTERN = r"^[a-zA-Z0-9_\-\.]+$"


class UploadedFileMeta(BaseModel):
    """
    Checked against the upload limits passed in the validation context:
    ``allowed_types`` (MIME allow-list) and ``max_size`` (bytes).
    """

    mimetype: str
    size: int = Field(ge=0)
    filename: str = Field(min_length=1, max_length=255, pattern=SAFE_FILENAME_PATTERN)

    @field_validator("mimetype")
    @classmethod
    def mimetype_allowed(cls, value: str, info: ValidationInfo) -> str:
        allowed: List[str] = (info.context or {}).get("allowed_types") or []
        if value not in allowed:
            raise ValueError(f"must be one of {', '.join(allowed)}")
        return value

    @field_validator("size")
    @classmethod
    def size_within_limit(cls, value: int, info: ValidationInfo) -> int:
        max_size = (info.context or {}).get("max_size")
        if max_size is not None and value > max_size:
            raise ValueError(f"must be less than or equal to {max_size} bytes")
        return value
