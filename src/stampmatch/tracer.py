"""
Hierarchical runtime tracing for StampMatch.

Nested, timed log lines for capture gestures and comparisons. Output goes to
stderr, and optionally to a file and as JSON records.
"""

import functools
import hashlib
import json
import sys
import time
from contextlib import contextmanager
from datetime import datetime


class TracerConfig:
    """Tracer switches and the optional log file."""

    def __init__(self):
        self.enabled = False
        self.level = "INFO"
        self.json_output = False
        self._file_handle = None

    def configure(self, enabled=False, level="INFO", file_path=None, json_output=False):
        self.close()
        self.enabled = enabled
        self.level = level.upper()
        self.json_output = json_output
        if enabled and file_path:
            self._file_handle = open(file_path, "w", encoding="utf-8")

    def close(self):
        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None


def _with_meta(message, meta):
    """Append key=value summaries to a message."""
    return " ".join([message] + [f"{k}={summarize(v)}" for k, v in meta.items()])


class Tracer:
    """
    Hierarchical tracer.

    Spans nest and report their duration; events are single lines attached
    to the innermost open span.
    """

    LEVELS = {"ERROR": 0, "WARN": 1, "INFO": 2, "DEBUG": 3}

    def __init__(self):
        self.config = TracerConfig()
        self._span_stack = []

    @property
    def depth(self):
        return len(self._span_stack)

    def _should_log(self, level):
        if not self.config.enabled:
            return False
        return self.LEVELS.get(level, 2) <= self.LEVELS.get(self.config.level, 2)

    def _emit(self, line):
        print(line, file=sys.stderr)
        if self.config._file_handle:
            self.config._file_handle.write(line + "\n")
            self.config._file_handle.flush()

    def _write(self, level, location, message, meta=None):
        if not self._should_log(level):
            return

        now = datetime.now()
        stamp = now.strftime("%H:%M:%S.") + f"{now.microsecond // 1000:03d}"
        module, func = location
        where = f"{module}:{func}" if func else module
        self._emit(f"{stamp} {level:<5} {'  ' * self.depth}{where}  {message}")

        if self.config.json_output:
            self._emit(json.dumps({
                "timestamp": stamp,
                "level": level,
                "depth": self.depth,
                "module": module,
                "function": func,
                "message": message,
                "meta": {k: summarize(v) for k, v in (meta or {}).items()},
            }))

    @contextmanager
    def span(self, name, module="", **meta):
        """
        Time a block as a nested span.

        A failing block is reported at ERROR level and its exception re-raised.
        """
        if not self.config.enabled:
            yield
            return

        location = (module, name)
        self._write("INFO", location, _with_meta("start", meta))
        self._span_stack.append(location)
        started = time.perf_counter()
        failure = None
        try:
            yield
        except Exception as e:
            failure = f"{type(e).__name__}: {str(e)[:100]}"
            raise
        finally:
            self._span_stack.pop()
            dt = f"dt={(time.perf_counter() - started) * 1000:.0f}ms"
            if failure is None:
                self._write("INFO", location, f"end ok {dt}")
            else:
                self._write("ERROR", location, f"failed {dt} error={failure}")

    def event(self, message, level="INFO", **meta):
        """Log a one-off event within the current span."""
        if not self._should_log(level):
            return
        location = self._span_stack[-1] if self._span_stack else ("", "")
        self._write(level, location, _with_meta(message, meta), meta)


def summarize(obj, max_len=200):
    """
    Summarize an object for logging.

    Returns a compact string that never exceeds max_len chars. Knows about
    numpy arrays, raster buffers, pydantic models, strings and containers.
    """
    try:
        result = _summarize_impl(obj)
    except Exception:
        return f"<{type(obj).__name__}>"
    if len(result) > max_len:
        return result[:max_len - 3] + "..."
    return result


def _summarize_impl(obj):
    if obj is None:
        return "None"

    import numpy as np
    from pydantic import BaseModel

    from stampmatch.models import RasterBuffer

    type_name = type(obj).__name__

    if isinstance(obj, RasterBuffer):
        h = hashlib.md5(obj.pixels.tobytes()).hexdigest()[:8]
        return f"RasterBuffer({obj.width}x{obj.height},h={h})"

    if isinstance(obj, np.ndarray):
        shape_str = "x".join(str(s) for s in obj.shape)
        if 0 < obj.size < 1000:
            h = hashlib.md5(obj.tobytes()).hexdigest()[:8]
        else:
            h = hashlib.md5(str(obj.shape).encode()).hexdigest()[:8]
        return f"ndarray({obj.dtype},{shape_str},h={h})"

    if isinstance(obj, BaseModel):
        fields = list(type(obj).model_fields.keys())[:3]
        return f"{type_name}(fields={fields}...)"

    # str-valued enums first, they are also str instances
    if hasattr(obj, "value") and isinstance(obj, str):
        return str(obj.value)

    if isinstance(obj, str):
        if len(obj) > 50:
            h = hashlib.md5(obj.encode()).hexdigest()[:8]
            return f"str(len={len(obj)},h={h})"
        return repr(obj)

    if isinstance(obj, (list, tuple)):
        if len(obj) == 0:
            return f"{type_name}(len=0)"
        return f"{type_name}(len={len(obj)},first={type(obj[0]).__name__})"

    if isinstance(obj, dict):
        keys_str = ",".join(str(k) for k in list(obj.keys())[:5])
        return f"dict(len={len(obj)},keys=[{keys_str}])"

    if isinstance(obj, (bool, int, float)):
        return str(obj)

    return f"<{type_name}>"


def trace(label=None):
    """
    Decorator to trace function execution.

    Wraps a function in a span that logs start/end with timing.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not _tracer.config.enabled:
                return func(*args, **kwargs)

            func_module = func.__module__.split(".")[-1] if func.__module__ else ""
            with _tracer.span(label or func.__name__, module=func_module):
                return func(*args, **kwargs)

        return wrapper
    return decorator


# Global tracer instance
_tracer = Tracer()


def get_tracer():
    """Get the global tracer instance."""
    return _tracer


def configure_tracer(enabled=False, level="INFO", file_path=None, json_output=False):
    """Configure the global tracer."""
    _tracer.config.configure(
        enabled=enabled,
        level=level,
        file_path=file_path,
        json_output=json_output,
    )
