"""Contact form submission sent from the public site"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, StringConstraints

FieldText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]


class ContactInquiry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: FieldText
    email: EmailStr
    reason: FieldText
    message: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=5000)]
