"""
Value validators backing validator slots.

A Schema wraps a pydantic TypeAdapter and validates in strict mode by
default, so "3" never matches an integer slot. Validation yields the
(possibly coerced) value on success and the first error message on
failure.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from datetime import date
from typing import Any, Annotated, Callable

from pydantic import AfterValidator, InstanceOf, NonNegativeInt, TypeAdapter
from pydantic import ValidationError as PydanticValidationError


@dataclass(frozen=True)
class SchemaResult:
    """Outcome of validating one value against a Schema."""
    success: bool
    value: Any = None
    error: str | None = None


class Schema:
    """
    Opaque accept/reject abstraction for a single value.

    Example:
        STRING.validate("hi")          # SchemaResult(success=True, value="hi")
        Schema(int).validate("3")      # rejected: strict mode
        Schema.where(callable, "callable").accepts(print)   # True
    """

    def __init__(self, annotation: Any, *, name: str | None = None, strict: bool = True):
        self.annotation = annotation
        self.name = name or _annotation_name(annotation)
        self.strict = strict
        self._adapter = TypeAdapter(annotation)

    def validate(self, value: Any) -> SchemaResult:
        try:
            coerced = self._adapter.validate_python(value, strict=self.strict)
        except PydanticValidationError as e:
            return SchemaResult(success=False, value=value, error=_first_error(e))
        return SchemaResult(success=True, value=coerced)

    def accepts(self, value: Any) -> bool:
        return self.validate(value).success

    @classmethod
    def where(cls, predicate: Callable[[Any], bool], name: str) -> Schema:
        """Build a schema from a plain predicate."""

        def check(value: Any) -> Any:
            try:
                ok = predicate(value)
            except TypeError:
                ok = False
            if not ok:
                raise ValueError(f"expected {name}")
            return value

        return cls(Annotated[Any, AfterValidator(check)], name=name)

    @classmethod
    def instance_of(cls, type_: type, name: str | None = None) -> Schema:
        return cls(InstanceOf[type_], name=name or type_.__name__)

    def __repr__(self) -> str:
        return f"Schema({self.name})"

    def __str__(self) -> str:
        return self.name


def is_schema(value: Any) -> bool:
    return isinstance(value, Schema)


def _annotation_name(annotation: Any) -> str:
    if annotation is Any:
        return "any"
    return getattr(annotation, "__name__", None) or repr(annotation)


def _first_error(error: PydanticValidationError) -> str:
    errors = error.errors()
    if not errors:
        return str(error)
    return errors[0].get("msg", str(error))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_exception_class(value: Any) -> bool:
    return isinstance(value, type) and issubclass(value, BaseException)


# ─────────────────────────────────────────────────────────────────────────────
# Common schemas
# ─────────────────────────────────────────────────────────────────────────────

ANY = Schema(Any, name="any")
STRING = Schema(str, name="string")
INTEGER = Schema(int, name="integer")
NON_NEGATIVE_INTEGER = Schema(NonNegativeInt, name="non-negative integer")
BOOLEAN = Schema(bool, name="boolean")
NUMBER = Schema.where(_is_number, "number")
DATE = Schema.instance_of(date, name="date")
CALLABLE = Schema.where(callable, "callable")
SIZED = Schema.where(lambda value: hasattr(value, "__len__"), "sized")
AWAITABLE = Schema.where(inspect.isawaitable, "awaitable")
EXCEPTION_CLASS = Schema.where(_is_exception_class, "exception class")
