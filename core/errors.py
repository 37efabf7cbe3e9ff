"""Identifier errors with tracking IDs."""

from utils.timestamp import format_timestamp


class IdError(Exception):
    """Base error with unique ID and timestamp for tracking."""

    def __init__(self, message, context=None, cause=None):
        super().__init__(message)
        # ids.ksuid raises these errors itself, so the import is deferred
        from ids.ksuid import generate_ksuid

        self.error_id = generate_ksuid()
        self.timestamp = format_timestamp()
        self.context = context or {}
        self.cause = cause

    @property
    def message(self):
        return super().__str__()

    def __str__(self):
        return f"[{self.error_id}] {super().__str__()}"

    def to_dict(self):
        return {
            "error": type(self).__name__,
            "error_id": self.error_id,
            "timestamp": self.timestamp,
            "msg": self.message,
            "context": self.context,
        }


class ConfigurationError(IdError):
    """Out-of-range worker/datacenter id or unparseable epoch."""

    def __init__(self, message, field=None, value=None, **kwargs):
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
            context["value"] = repr(value)
        super().__init__(message, context=context, **kwargs)


class EncodingError(IdError):
    """Malformed input to a decoder, or an invalid alphabet."""

    def __init__(self, message, value=None, **kwargs):
        context = kwargs.pop("context", {})
        if value is not None:
            context["value"] = value if isinstance(value, str) else repr(value)
        super().__init__(message, context=context, **kwargs)


class EntropyExhaustion(IdError):
    """Monotonic entropy bump overflowed within a single millisecond."""

    def __init__(self, message, timestamp_ms=None, **kwargs):
        context = kwargs.pop("context", {})
        if timestamp_ms is not None:
            context["timestamp_ms"] = timestamp_ms
        super().__init__(message, context=context, **kwargs)


class ClockError(IdError):
    """Clock wait bound exceeded, or time outside the packed field range."""

    def __init__(self, message, timestamp_ms=None, **kwargs):
        context = kwargs.pop("context", {})
        if timestamp_ms is not None:
            context["timestamp_ms"] = timestamp_ms
        super().__init__(message, context=context, **kwargs)
