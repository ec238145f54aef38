"""
Changeset and result types.

A Changeset is threaded through every validation stage. Stages never mutate
it; ``put_change`` and ``add_error`` return a new instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple, Union

from .errors import ValidationError, format_validation_errors


class Operation(str, Enum):
    CREATE = "create"
    UPDATE = "update"

    @classmethod
    def parse(cls, value: Union["Operation", str]) -> "Operation":
        if isinstance(value, Operation):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown operation {value!r}; expected 'create' or 'update'")


@dataclass(frozen=True)
class Changeset:
    data: Mapping[str, Any] = field(default_factory=dict)
    params: Mapping[str, Any] = field(default_factory=dict)
    changes: Mapping[str, Any] = field(default_factory=dict)
    errors: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "changes", MappingProxyType(dict(self.changes)))
        object.__setattr__(self, "errors", MappingProxyType(
            {key: tuple(messages) for key, messages in self.errors.items()}
        ))

    @property
    def valid(self) -> bool:
        return not self.errors

    def get_field(self, name: str, default: Any = None) -> Any:
        if name in self.changes:
            return self.changes[name]
        return self.data.get(name, default)

    def put_change(self, name: str, value: Any) -> "Changeset":
        return Changeset(self.data, self.params, {**self.changes, name: value}, self.errors)

    def delete_change(self, name: str) -> "Changeset":
        changes = {key: value for key, value in self.changes.items() if key != name}
        return Changeset(self.data, self.params, changes, self.errors)

    def add_error(self, name: str, message: str) -> "Changeset":
        errors = dict(self.errors)
        errors[name] = errors.get(name, ()) + (message,)
        return Changeset(self.data, self.params, self.changes, errors)

    def merge_errors(self, errors: Mapping[str, Tuple[str, ...]], prefix: str = "") -> "Changeset":
        merged = self
        for name, messages in errors.items():
            for message in messages:
                merged = merged.add_error(f"{prefix}{name}", message)
        return merged

    def to_result(self) -> "AggregateResult":
        if self.valid:
            return Accepted(dict(self.changes))
        return Rejected({key: list(messages) for key, messages in self.errors.items()})


@dataclass(frozen=True)
class Accepted:
    changes: Dict[str, Any]

    valid = True

    @property
    def errors(self) -> Dict[str, List[str]]:
        return {}

    def raise_for_errors(self) -> None:
        return None


@dataclass(frozen=True)
class Rejected:
    errors: Dict[str, List[str]]

    valid = False

    @property
    def changes(self) -> Dict[str, Any]:
        return {}

    def raise_for_errors(self) -> None:
        raise ValidationError(
            message="Validation failed. Please check your input.",
            fields=format_validation_errors(self.errors),
        )


AggregateResult = Union[Accepted, Rejected]
