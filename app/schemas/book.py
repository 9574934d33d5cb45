from pydantic import BaseModel, field_validator
import uuid

# Book base schema
class BookBase(BaseModel):
    title: str
    summary: str
    isbn: str
    author_id: uuid.UUID

    @field_validator("title", "summary", "isbn", mode="before")
    @classmethod
    def trim_and_check(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("value cannot be empty")
        return v

# Book create schema
class BookCreate(BookBase):
    pass