from pydantic import BaseModel, ConfigDict, Field
from typing import ClassVar
from datetime import date

import uuid

# Author base schema
class AuthorBase(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    family_name: str = Field(min_length=1, max_length=100)
    date_of_birth: date | None = None
    date_of_death: date | None = None

# Author create schema (sanitized draft, also used for full-replace updates)
class AuthorCreate(AuthorBase):
    pass

# Author read schema
class AuthorRead(AuthorBase):
    id: uuid.UUID

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)
