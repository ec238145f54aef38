"""Structured JSON logging for order, account and stock writes."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from django.conf import settings

from orderflow.logging_filters import get_current_correlation_id


class StructuredLogger:
    """One JSON document per log line, tagged with the current correlation id."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _emit(self, level: int, label: str, message: str, **context: Any) -> None:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": label,
            "message": message,
            "service": "orderflow",
            "environment": "development" if settings.DEBUG else "production",
            "correlation_id": get_current_correlation_id(),
        }
        entry.update(context)
        self.logger.log(level, json.dumps(entry, default=str))

    def error(self, message: str, exception: Optional[Exception] = None, **context: Any) -> None:
        if exception is not None:
            context["exception"] = {"type": type(exception).__name__, "message": str(exception)}
        self._emit(logging.ERROR, "ERROR", message, **context)

    def audit(self, action: str, resource: str, resource_id: Any = None,
              errors: Optional[Mapping[str, Any]] = None, **details: Any) -> None:
        """Audit trail entry for a validated write, accepted or rejected."""
        self._emit(
            logging.INFO, "AUDIT", action,
            resource=resource,
            resource_id=resource_id,
            status="rejected" if errors else "accepted",
            error_fields=sorted(errors) if errors else None,
            **details,
        )


audit_logger = StructuredLogger("orderflow.audit")
