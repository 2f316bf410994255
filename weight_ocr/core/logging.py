from __future__ import annotations

import logging

_STANDARD_ATTRS = set(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}


class ExtraFormatter(logging.Formatter):
    """Append the ``extra={...}`` fields of a record as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if not extras:
            return base
        pairs = " ".join(f"{k}={v!r}" for k, v in sorted(extras.items()))
        return f"{base} {pairs}"


class _ServiceHandler(logging.StreamHandler):
    pass


def configure_logging(level: str = "INFO") -> None:
    """Install the service's stream handler on the root logger (once) and set the level."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _ServiceHandler)]:
        root.removeHandler(existing)

    handler = _ServiceHandler()
    handler.setFormatter(ExtraFormatter("%(asctime)s %(levelname)s %(name)s - %(message)s"))
    root.addHandler(handler)
    root.setLevel(level.upper())
