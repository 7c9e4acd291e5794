"""Validator protocol, violation collection and a group-aware constraint validator."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, overload, runtime_checkable

from loguru import logger

from fastapi_param_converter._types import ConstraintCheck

DEFAULT_GROUP = "Default"


@dataclass(frozen=True)
class ConstraintViolation:
    """A single failed constraint."""

    message: str
    property_path: str = ""
    invalid_value: Any = None
    code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "property_path": self.property_path,
            "code": self.code,
        }


class ConstraintViolationList(Sequence[ConstraintViolation]):
    """Ordered collection of violations. Empty means the value is valid."""

    def __init__(self, violations: Iterable[ConstraintViolation] = ()) -> None:
        self._violations: list[ConstraintViolation] = list(violations)

    def add(self, violation: ConstraintViolation) -> None:
        self._violations.append(violation)

    def extend(self, violations: Iterable[ConstraintViolation]) -> None:
        self._violations.extend(violations)

    @overload
    def __getitem__(self, index: int) -> ConstraintViolation: ...

    @overload
    def __getitem__(self, index: slice) -> ConstraintViolationList: ...

    def __getitem__(
        self, index: int | slice
    ) -> ConstraintViolation | ConstraintViolationList:
        if isinstance(index, slice):
            return ConstraintViolationList(self._violations[index])
        return self._violations[index]

    def __len__(self) -> int:
        return len(self._violations)

    def __iter__(self) -> Iterator[ConstraintViolation]:
        return iter(self._violations)

    def __bool__(self) -> bool:
        return bool(self._violations)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConstraintViolationList):
            return self._violations == other._violations
        return NotImplemented

    def __repr__(self) -> str:
        return f"ConstraintViolationList({self._violations!r})"

    def by_property(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for violation in self._violations:
            grouped.setdefault(violation.property_path, []).append(violation.message)
        return grouped

    def to_list(self) -> list[dict[str, Any]]:
        return [violation.to_dict() for violation in self._violations]


@runtime_checkable
class Validator(Protocol):
    """Pluggable interface checking a converted object against constraints."""

    def validate(
        self,
        value: Any,
        groups: Sequence[str] | None,
        traverse: bool,
        deep: bool,
    ) -> ConstraintViolationList: ...


@dataclass(frozen=True)
class Constraint:
    """Rule on one property. ``check`` returns True when the value is valid.

    An empty ``property_path`` makes the rule apply to the object itself.
    """

    property_path: str
    check: ConstraintCheck
    message: str
    groups: tuple[str, ...] = (DEFAULT_GROUP,)
    code: str | None = None


def _join(prefix: str, path: str) -> str:
    if not prefix:
        return path
    if not path:
        return prefix
    if path.startswith("["):
        return f"{prefix}{path}"
    return f"{prefix}.{path}"


class ConstraintValidator:
    """Validates objects against constraints registered per type.

    ``traverse`` descends into attributes whose values are themselves of a
    registered type; ``deep`` additionally descends into lists, tuples, sets
    and mapping values.
    """

    def __init__(self) -> None:
        self._constraints: dict[type, list[Constraint]] = {}

    def register(self, type_: type, *constraints: Constraint) -> ConstraintValidator:
        self._constraints.setdefault(type_, []).extend(constraints)
        return self

    def constraints_for(self, type_: type) -> list[Constraint]:
        found: list[Constraint] = []
        for klass in type_.__mro__:
            found.extend(self._constraints.get(klass, ()))
        return found

    def is_registered(self, value: Any) -> bool:
        return any(klass in self._constraints for klass in type(value).__mro__)

    def validate(
        self,
        value: Any,
        groups: Sequence[str] | None = None,
        traverse: bool = False,
        deep: bool = False,
    ) -> ConstraintViolationList:
        active = tuple(groups) if groups else (DEFAULT_GROUP,)
        violations = ConstraintViolationList()
        self._validate(value, "", active, traverse, deep, violations, set())
        logger.debug(
            f"Validated {type(value).__name__} in groups {list(active)}: "
            f"{len(violations)} violation(s)"
        )
        return violations

    def _validate(
        self,
        value: Any,
        prefix: str,
        groups: tuple[str, ...],
        traverse: bool,
        deep: bool,
        violations: ConstraintViolationList,
        seen: set[int],
    ) -> None:
        if id(value) in seen:
            return
        seen.add(id(value))

        for constraint in self.constraints_for(type(value)):
            if not set(constraint.groups) & set(groups):
                continue
            prop = (
                getattr(value, constraint.property_path, None)
                if constraint.property_path
                else value
            )
            if not constraint.check(prop):
                violations.add(
                    ConstraintViolation(
                        message=constraint.message,
                        property_path=_join(prefix, constraint.property_path),
                        invalid_value=prop,
                        code=constraint.code,
                    )
                )

        if not traverse:
            return

        for attr, child in _attributes(value):
            path = _join(prefix, attr)
            if self.is_registered(child):
                self._validate(child, path, groups, traverse, deep, violations, seen)
            elif deep:
                self._validate_items(child, path, groups, deep, violations, seen)

    def _validate_items(
        self,
        value: Any,
        prefix: str,
        groups: tuple[str, ...],
        deep: bool,
        violations: ConstraintViolationList,
        seen: set[int],
    ) -> None:
        if isinstance(value, Mapping):
            items: Iterable[tuple[Any, Any]] = value.items()
        elif isinstance(value, (list, tuple)):
            items = enumerate(value)
        elif isinstance(value, (set, frozenset)):
            items = enumerate(sorted(value, key=repr))
        else:
            return
        if id(value) in seen:
            return
        seen.add(id(value))

        for key, item in items:
            path = f"{prefix}[{key}]"
            if self.is_registered(item):
                self._validate(item, path, groups, True, deep, violations, seen)
            else:
                self._validate_items(item, path, groups, deep, violations, seen)


def _attributes(value: Any) -> Iterable[tuple[str, Any]]:
    """Public attributes of ``value``: pydantic fields, dataclass fields or ``__dict__``."""
    fields = getattr(type(value), "model_fields", None)
    if isinstance(fields, Mapping):
        return [(name, getattr(value, name, None)) for name in fields]
    dataclass_fields = getattr(value, "__dataclass_fields__", None)
    if isinstance(dataclass_fields, Mapping):
        return [(name, getattr(value, name, None)) for name in dataclass_fields]
    attrs = getattr(value, "__dict__", None)
    if isinstance(attrs, Mapping):
        return [(k, v) for k, v in attrs.items() if not k.startswith("_")]
    return []
