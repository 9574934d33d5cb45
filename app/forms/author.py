from collections.abc import Mapping
from typing import Any

from app.forms.pipeline import Field, Form, ValidationResult
from app.schemas.author import AuthorCreate

# Names are limited to ASCII letters and digits.
author_form = Form(
    Field("first_name")
    .trim()
    .required(message="First name must be specified.")
    .escape()
    .alphanumeric(message="First name has non-alphanumeric characters."),
    Field("family_name")
    .trim()
    .required(message="Family name must be specified.")
    .escape()
    .alphanumeric(message="Family name has non-alphanumeric characters."),
    Field("date_of_birth").optional().iso_date(message="Invalid date of birth"),
    Field("date_of_death").optional().iso_date(message="Invalid date of death"),
)


def validate_author(data: Mapping[str, Any]) -> ValidationResult[AuthorCreate]:
    return author_form.validate(data, AuthorCreate)
