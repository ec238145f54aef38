"""
Nested line-item validation.

Every child is validated on its own, then a single ordered scan checks that
no two children reference the same variant. The scan stops at the first
repeat and reports one aggregate-level error.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Type

from .changeset import Changeset, Operation
from .errors import BLANK_MESSAGE, DUPLICATE_VARIANTS_KEY, DUPLICATE_VARIANTS_MESSAGE, INVALID_MESSAGE
from .schemas import BaseSchema, LineItemSchema

logger = logging.getLogger(__name__)


class ChildCollectionValidator:
    def __init__(
        self,
        field: str = "line_items",
        schema: Type[BaseSchema] = LineItemSchema,
        key: str = "variant_id",
    ):
        self.field = field
        self.schema = schema
        self.key = key

    def validate(self, changeset: Changeset, raw_children: Optional[Any], required: bool) -> Changeset:
        # the uniqueness scan only runs when the parent was valid on entry
        parent_valid = changeset.valid
        changeset = self.cast_children(changeset, raw_children, required)
        if not parent_valid:
            return changeset
        return self.ensure_unique(changeset)

    def cast_children(self, changeset: Changeset, raw_children: Optional[Any], required: bool) -> Changeset:
        if raw_children is None:
            if required:
                return changeset.add_error(self.field, BLANK_MESSAGE)
            return changeset

        if not isinstance(raw_children, (list, tuple)):
            return changeset.add_error(self.field, INVALID_MESSAGE)

        if required and not raw_children:
            return changeset.add_error(self.field, BLANK_MESSAGE)

        validated: List[Dict[str, Any]] = []
        failed = 0
        for index, raw_child in enumerate(raw_children):
            if not isinstance(raw_child, dict):
                changeset = changeset.add_error(f"{self.field}.{index}", INVALID_MESSAGE)
                failed += 1
                continue
            child = self.schema.validate({}, raw_child, Operation.CREATE)
            if child.valid:
                validated.append(dict(child.changes))
            else:
                changeset = changeset.merge_errors(child.errors, prefix=f"{self.field}.{index}.")
                failed += 1

        if failed:
            logger.debug("%d of %d %s rejected", failed, len(raw_children), self.field)
            return changeset
        return changeset.put_change(self.field, tuple(validated))

    def ensure_unique(self, changeset: Changeset) -> Changeset:
        if not changeset.valid:
            return changeset

        duplicate = first_duplicate(changeset.get_field(self.field, ()), self.key)
        if duplicate is None:
            return changeset

        logger.info("Rejected %s: %s %r appears more than once", self.field, self.key, duplicate)
        return changeset.add_error(DUPLICATE_VARIANTS_KEY, DUPLICATE_VARIANTS_MESSAGE)


def first_duplicate(children: Sequence[Dict[str, Any]], key: str) -> Optional[Any]:
    seen = set()
    for child in children:
        value = child.get(key)
        if value in seen:
            return value
        seen.add(value)
    return None
