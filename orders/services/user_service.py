"""
User Service - validated writes of customer accounts.

Responsibilities:
- Account creation with a derived credential hash
- Partial account updates (names, email, password change)
- Email uniqueness, reported as a field error
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from django.db import IntegrityError, transaction

from orderflow.logging_filters import correlation_scope

from ..models import User
from ..structured_logging import audit_logger
from ..validation import Operation, validate_user
from ..validation.changeset import AggregateResult, Rejected
from ..validation.fields import Hasher
from .persistence import assign_changes

logger = logging.getLogger(__name__)

TAKEN_MESSAGE = "has already been taken"

STORED_FIELDS = ("first_name", "last_name", "email", "password_hash")


class UserService:
    """Service for creating and updating user accounts."""

    @staticmethod
    def snapshot(user: User) -> Dict[str, Any]:
        return {
            "first_name": user.first_name,
            "last_name": user.last_name,
            "email": user.email,
        }

    @classmethod
    def create_user(
        cls,
        params: Mapping[str, Any],
        hasher: Optional[Hasher] = None,
    ) -> Tuple[AggregateResult, Optional[User]]:
        """
        Create a user from raw signup parameters.

        Args:
            params: raw input, including password and password_confirmation
            hasher: credential hash function; the configured one when omitted

        Returns:
            Tuple of (result, user); user is None when the result is Rejected
        """
        with correlation_scope():
            result = cls._validate(None, {}, params, Operation.CREATE, hasher)
            if not result.valid:
                audit_logger.audit("user.create", "user", errors=result.errors)
                return result, None

            user = User()
            try:
                with transaction.atomic():
                    assign_changes(user, result.changes, STORED_FIELDS)
                    user.save()
            except IntegrityError:
                logger.warning("Email uniqueness violated at write time")
                return Rejected({"email": [TAKEN_MESSAGE]}), None

            audit_logger.audit("user.create", "user", resource_id=user.pk)
            return result, user

    @classmethod
    def update_user(
        cls,
        user: User,
        params: Mapping[str, Any],
        hasher: Optional[Hasher] = None,
    ) -> Tuple[AggregateResult, User]:
        with correlation_scope():
            result = cls._validate(user.pk, cls.snapshot(user), params, Operation.UPDATE, hasher)
            if not result.valid:
                audit_logger.audit("user.update", "user", resource_id=user.pk, errors=result.errors)
                return result, user

            try:
                with transaction.atomic():
                    assign_changes(user, result.changes, STORED_FIELDS)
                    user.save()
            except IntegrityError:
                user.refresh_from_db()
                return Rejected({"email": [TAKEN_MESSAGE]}), user

            audit_logger.audit("user.update", "user", resource_id=user.pk,
                               password_changed="password_hash" in result.changes)
            return result, user

    @staticmethod
    def _validate(
        user_id: Optional[int],
        current: Mapping[str, Any],
        params: Mapping[str, Any],
        operation: Operation,
        hasher: Optional[Hasher],
    ) -> AggregateResult:
        result = validate_user(current, params, operation, hasher=hasher)
        if not result.valid or "email" not in result.changes:
            return result

        taken = User.objects.filter(email__iexact=result.changes["email"]).exclude(pk=user_id).exists()
        if taken:
            return Rejected({"email": [TAKEN_MESSAGE]})
        return result
