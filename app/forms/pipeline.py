"""
Declarative form validation.

A ``Form`` is a list of ``Field`` chains. Each chain is an ordered list of
sanitizers and validators that run against one submitted value::

    Form(
        Field("first_name").trim().required().escape().alphanumeric(),
        Field("date_of_birth").optional().iso_date(),
    )

Failing validators do not stop the chain, so one submission reports every
problem at once. ``optional()`` is the only rule that ends a chain early: an
empty value is treated as absent, not as an error.
"""
from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_ALPHANUMERIC = re.compile(r"[0-9A-Za-z]+")
_ESCAPES: dict[str, str] = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
}


@dataclass(frozen=True)
class FieldError:
    """A single failed rule, with the value it was checked against."""
    field: str
    message: str
    value: object = None


@dataclass
class _FieldState:
    name: str
    value: Any
    errors: list[FieldError] = field(default_factory=list)
    stopped: bool = False
    # Set by escape(): the text as submitted, before entity encoding.
    unescaped: Any = None

    def fail(self, message: str) -> None:
        self.errors.append(FieldError(self.name, message, self.value))


Rule = Callable[[_FieldState], None]


def parse_iso_date(text: str) -> date:
    """Parse an ISO-8601 date; full datetimes are truncated to their date."""
    try:
        return date.fromisoformat(text)
    except ValueError:
        return datetime.fromisoformat(text).date()


class Field:
    """Chain builder for the rules applied to one form field."""

    def __init__(self, name: str, label: str | None = None):
        self.name: str = name
        self.label: str = label or name.replace("_", " ").capitalize()
        self._rules: list[Rule] = []

    def _add(self, rule: Rule) -> Field:
        self._rules.append(rule)
        return self

    def trim(self) -> Field:
        def rule(state: _FieldState) -> None:
            state.value = "" if state.value is None else str(state.value).strip()

        return self._add(rule)

    def required(self, min_length: int = 1, message: str | None = None) -> Field:
        text = message or f"{self.label} must be specified."

        def rule(state: _FieldState) -> None:
            if len(str(state.value or "")) < min_length:
                state.fail(text)

        return self._add(rule)

    def escape(self) -> Field:
        def rule(state: _FieldState) -> None:
            state.unescaped = state.value
            state.value = "".join(_ESCAPES.get(ch, ch) for ch in str(state.value or ""))

        return self._add(rule)

    def alphanumeric(self, message: str | None = None) -> Field:
        text = message or f"{self.label} has non-alphanumeric characters."

        def rule(state: _FieldState) -> None:
            if not _ALPHANUMERIC.fullmatch(str(state.value or "")):
                state.fail(text)

        return self._add(rule)

    def optional(self) -> Field:
        def rule(state: _FieldState) -> None:
            if not state.value:
                state.value = None
                state.stopped = True

        return self._add(rule)

    def iso_date(self, message: str | None = None) -> Field:
        text = message or f"Invalid {self.label.lower()}"

        def rule(state: _FieldState) -> None:
            try:
                state.value = parse_iso_date(str(state.value))
            except ValueError:
                state.fail(text)

        return self._add(rule)

    def check(self, data: Mapping[str, Any]) -> _FieldState:
        state = _FieldState(self.name, data.get(self.name))
        for rule in self._rules:
            if state.stopped:
                break
            rule(state)
        return state

    def run(self, data: Mapping[str, Any]) -> tuple[Any, list[FieldError]]:
        state = self.check(data)
        return state.value, state.errors


@dataclass(frozen=True)
class ValidationResult(Generic[ModelT]):
    """
    Outcome of validating one submission.

    ``values`` always holds the sanitized input. ``echo`` holds what should be
    shown back in a re-rendered form: the same values, except that escaped
    fields keep the text as typed, since templates escape on output.
    ``draft`` is set only when there are no errors.
    """
    values: dict[str, Any]
    errors: list[FieldError]
    draft: ModelT | None = None
    echo: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def _from_pydantic(exc: ValidationError, values: Mapping[str, Any]) -> list[FieldError]:
    errors: list[FieldError] = []
    for err in exc.errors():
        loc = err.get("loc") or ("__all__",)
        name = str(loc[0])
        errors.append(FieldError(name, str(err.get("msg", "Invalid value")), values.get(name)))
    return errors


class Form:
    def __init__(self, *fields: Field):
        self.fields: tuple[Field, ...] = fields

    def validate(self, data: Mapping[str, Any], model: type[ModelT]) -> ValidationResult[ModelT]:
        """Run every field chain, then load the sanitized values into ``model``."""
        values: dict[str, Any] = {}
        echo: dict[str, Any] = {}
        errors: list[FieldError] = []
        for form_field in self.fields:
            state = form_field.check(data)
            values[form_field.name] = state.value
            echo[form_field.name] = state.value if state.unescaped is None else state.unescaped
            errors.extend(state.errors)

        if errors:
            return ValidationResult(values=values, errors=errors, echo=echo)

        try:
            draft = model.model_validate(values)
        except ValidationError as exc:
            return ValidationResult(
                values=values, errors=_from_pydantic(exc, values), echo=echo
            )
        return ValidationResult(values=values, errors=[], draft=draft, echo=echo)
