"""swiftstore storage OpenTelemetry tracing integration.

Provides a tracing decorator for storage operations.

Span attributes are restricted to safe values:
    - Never export raw references (they may be content hashes of private data)
    - Never export credentials, tokens or endpoint query strings
"""

from __future__ import annotations

import functools
import hashlib
import os
from collections.abc import Callable
from typing import Any, TypeVar, cast

from opentelemetry import trace

from swiftstore.storage.models import ListPage

SWIFTSTORE_OTEL_ENABLED_ENV = "SWIFTSTORE_OTEL_ENABLED"

F = TypeVar("F", bound=Callable[..., Any])


def _get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    val = os.environ.get(key, "").strip().lower()
    if val in ("1", "true", "yes"):
        return True
    if val in ("0", "false", "no", ""):
        return default
    return default


def is_tracing_enabled() -> bool:
    """Check if OpenTelemetry tracing of storage operations is enabled."""
    return _get_env_bool(SWIFTSTORE_OTEL_ENABLED_ENV, False)


def traced_storage_operation(operation: str) -> Callable[[F], F]:
    """Decorator to trace storage operations with OpenTelemetry.

    The decorated method's first positional argument, if it is a string, is
    taken as the object reference and only its SHA256 is recorded.

    Args:
        operation: Operation name (e.g., "put", "download", "list").

    Returns:
        Decorated function that emits OTel spans when tracing is enabled.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            if not is_tracing_enabled():
                return func(self, *args, **kwargs)

            tracer = trace.get_tracer("swiftstore.object_store")
            span_name = f"swiftstore.object_store.{operation}"

            with tracer.start_as_current_span(span_name) as span:
                span.set_attribute("storage.backend", getattr(self, "backend_name", "unknown"))
                container = getattr(self, "container", None)
                if container:
                    span.set_attribute("swiftstore.container", container)

                if operation != "list" and args and isinstance(args[0], str):
                    ref_sha256 = hashlib.sha256(args[0].encode("utf-8")).hexdigest()
                    span.set_attribute("swiftstore.ref_sha256", ref_sha256)
                if operation == "put" and len(args) > 1 and isinstance(args[1], bytes | bytearray):
                    span.set_attribute("swiftstore.object_size_bytes", len(args[1]))

                try:
                    result = func(self, *args, **kwargs)
                except Exception as e:
                    span.set_attribute("error", True)
                    span.set_attribute("error.type", type(e).__name__)
                    kind = getattr(e, "kind", None)
                    if kind is not None:
                        span.set_attribute("swiftstore.error_kind", str(kind.value))
                    raise

                _add_result_attributes(span, result, operation)
                return result

        return cast(F, wrapper)

    return decorator


def _add_result_attributes(span: Any, result: Any, operation: str) -> None:
    """Add result-based attributes to span safely."""
    if operation == "download" and isinstance(result, bytes):
        span.set_attribute("swiftstore.object_size_bytes", len(result))
    elif operation == "list" and isinstance(result, ListPage):
        span.set_attribute("swiftstore.list_item_count", len(result.refs))
        span.set_attribute("swiftstore.list_has_more", result.has_more)
