"""OpenTelemetry tracing decorators."""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

from opentelemetry import trace

# Type variable for generic function signatures
F = TypeVar("F", bound=Callable[..., Any])


def traced(span_name: str | None = None, service_name: str = "order-svc") -> Callable[[F], F]:
    """Decorator to add OpenTelemetry tracing to a function.

    Creates a new span for each call, recording the table being worked on
    when the call passes a ``table_id`` and marking failures with the
    exception type.

    Args:
        span_name: Name for the span (defaults to function name if not provided)
        service_name: Service name for span attributes

    Returns:
        Decorated function with tracing

    Example:
        @traced("order.place")
        def place_order(self, table_id: int, guest_count: int, selections: list[int]) -> Order:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name) as span:
                span.set_attribute("service.name", service_name)

                if span_name:
                    span.set_attribute("function.name", func.__name__)

                table_id = kwargs.get("table_id")
                if isinstance(table_id, int):
                    span.set_attribute("table.id", table_id)

                try:
                    result = func(*args, **kwargs)
                    span.set_attribute("success", True)
                    return result
                except Exception as e:
                    span.set_attribute("success", False)
                    span.set_attribute("error.type", type(e).__name__)
                    span.set_attribute("error.message", str(e))
                    span.record_exception(e)
                    raise

        return wrapper  # type: ignore

    return decorator
