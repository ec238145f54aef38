import uuid
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

_thread_locals = threading.local()


class CorrelationIDFilter(logging.Filter):
    def filter(self, record):
        record.correlation_id = get_current_correlation_id()
        return True


def get_current_correlation_id() -> str:
    return getattr(_thread_locals, 'correlation_id', 'no-id')


@contextmanager
def correlation_scope(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Tag every log record emitted inside the block with one correlation id."""
    previous = getattr(_thread_locals, 'correlation_id', None)
    _thread_locals.correlation_id = correlation_id or str(uuid.uuid4())
    try:
        yield _thread_locals.correlation_id
    finally:
        if previous is None:
            del _thread_locals.correlation_id
        else:
            _thread_locals.correlation_id = previous
