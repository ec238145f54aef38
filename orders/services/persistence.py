"""
Helpers shared by the write services.

The validation core does not know whether referenced rows exist. These
helpers look them up after a change set has been accepted and report
missing rows in the same field-error shape the core uses.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Type

from django.db import models

from orders.validation.errors import DOES_NOT_EXIST_MESSAGE
from orders.validation.money import Money


def reference_errors(
    changes: Mapping[str, Any],
    references: Mapping[str, Type[models.Model]],
) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for field_name, model in references.items():
        value = changes.get(field_name)
        if value is not None and not model.objects.filter(pk=value).exists():
            errors[field_name] = [DOES_NOT_EXIST_MESSAGE]
    return errors


def child_reference_errors(
    children: Iterable[Mapping[str, Any]],
    field_name: str,
    model: Type[models.Model],
    prefix: str,
) -> Dict[str, List[str]]:
    children = list(children)
    wanted = {child[field_name] for child in children if child.get(field_name) is not None}
    existing = set(model.objects.filter(pk__in=wanted).values_list("pk", flat=True))

    errors: Dict[str, List[str]] = {}
    for index, child in enumerate(children):
        if child.get(field_name) not in existing:
            errors[f"{prefix}.{index}.{field_name}"] = [DOES_NOT_EXIST_MESSAGE]
    return errors


def assign_changes(instance: models.Model, changes: Mapping[str, Any], field_names: Iterable[str]) -> None:
    """Copy accepted changes onto a model instance.

    A cleared text field is stored as "" since text columns are not nullable.
    """
    for name in field_names:
        if name not in changes:
            continue
        value = changes[name]
        field = instance._meta.get_field(name)
        if value is None and not field.null:
            value = "" if isinstance(field, (models.CharField, models.TextField)) else field.get_default()
        if isinstance(value, Money):
            value = value.amount
        setattr(instance, field.attname, value)
