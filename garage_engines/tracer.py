"""
garage_engines.tracer -- GARAGE_ENGINE_TRACE records for valuation engines.

Responsibility:
    ``@traced_engine`` wraps a pure engine method and, after it returns,
    logs one DEBUG record naming the engine, its version, a fingerprint of
    the chosen keyword inputs, the part being valued (when the call names
    one) and the elapsed time.  Two traces with equal fingerprints saw
    equal inputs, which is how a surprising report figure is replayed.

Architecture position:
    Engines -- support for the pure calculation layer.  Emits a log record
    and nothing else.

Invariants enforced:
    - Fingerprints depend only on input values: Decimals keep their
      scale, mappings are key-sorted, sequences keep their order.
    - Tracing never changes the wrapped call's arguments or result, and
      an exception from the call propagates without a trace.
    - Below DEBUG the wrapper calls straight through; no fingerprint is
      computed.
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import logging
import time
from collections.abc import Callable, Mapping
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from garage_kernel.logging_config import get_logger

logger = get_logger("engines.tracer")

TRACE_TYPE = "GARAGE_ENGINE_TRACE"


def _canonicalize(value: Any) -> str:
    """Stable text form of one input value."""
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (str, int, Decimal, date, UUID)):
        return str(value)
    if isinstance(value, Mapping):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        return "{" + ",".join(f"{k}:{_canonicalize(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return type(value).__name__ + _canonicalize(
            {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        )
    return repr(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    kwargs: Mapping[str, Any],
) -> str:
    """16-hex-char SHA-256 prefix over ``field=value`` pairs; absent fields read as null."""
    canonical = "|".join(
        f"{name}={_canonicalize(kwargs.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """
    Decorate an engine method so each call emits GARAGE_ENGINE_TRACE.

    Engines take their inputs as keyword arguments; only keyword arguments
    are fingerprinted.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not logger.isEnabledFor(logging.DEBUG):
                return func(*args, **kwargs)

            started = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 3)

            logger.debug(
                TRACE_TYPE,
                extra={
                    "trace_type": TRACE_TYPE,
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": compute_input_fingerprint(fingerprint_fields, kwargs),
                    "part_id": kwargs.get("part_id"),
                    "duration_ms": elapsed_ms,
                    "function": func.__qualname__,
                },
            )
            return result

        return wrapper

    return decorator
