# filevault/models/user.py
from pydantic import BaseModel, Field, StrictStr, field_validator


class Credentials(BaseModel):
    username: StrictStr = Field(min_length=1)
    password: StrictStr

    @field_validator("username")
    @classmethod
    def no_separator(cls, value: str) -> str:
        # the username is the first segment of every object key
        if "/" in value:
            raise ValueError("username must not contain '/'")
        return value
