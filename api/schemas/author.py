# api/schemas/author.py
from pydantic import BaseModel, ConfigDict, field_validator


class AuthorSchema(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class AuthorCreate(BaseModel):
    id: str
    name: str

    @field_validator('id', 'name')
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value
