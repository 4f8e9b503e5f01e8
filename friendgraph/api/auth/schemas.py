import re

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class UserRegister(BaseModel):
    model_config = {
        'from_attributes': True,
        'alias_generator': to_camel,
        'populate_by_name': True
    }

    username: str = Field(..., min_length=3, max_length=50, description="Login")
    password: str = Field(..., min_length=8, description="Password")
    name: str = Field(..., min_length=2, max_length=100, description="Display name")

    @field_validator('username')
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not re.match(r'^[a-zA-Z0-9_-]+$', v):
            raise ValueError('Username may only contain letters, digits, _ and -')
        return v.lower()


class Token(BaseModel):
    model_config = {'from_attributes': True}

    access_token: str
    token_type: str = "bearer"
