"""Logging for the vCenter access connector.

Components receive a ``ContextualLogger`` and narrow it with
``with_context(...)``; the dimensions are rendered after the message so
per-resource-type output can be grepped.
"""

import logging
import sys
from typing import Any, Dict, MutableMapping, Optional, Tuple

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter carrying a dictionary of context dimensions."""

    def __init__(self, logger: logging.Logger, dimensions: Optional[Dict[str, Any]] = None):
        """Wrap ``logger`` with the given context dimensions."""
        super().__init__(logger, dict(dimensions or {}))
        self.dimensions: Dict[str, Any] = dict(dimensions or {})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        """Append the context dimensions to the message."""
        if not self.dimensions:
            return msg, kwargs
        rendered = " ".join(f"{key}={value}" for key, value in self.dimensions.items())
        return f"{msg} [{rendered}]", kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with extra dimensions merged into the current ones."""
        return ContextualLogger(self.logger, {**self.dimensions, **dimensions})


def _build_root_logger(name: str) -> logging.Logger:
    base = logging.getLogger(name)
    if not base.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        base.addHandler(handler)
        base.setLevel(logging.INFO)
        base.propagate = False
    return base


def configure_logging(level: str) -> None:
    """Set the level of the connector's root logger."""
    _build_root_logger("vcenter_access").setLevel(level.upper())


logger = ContextualLogger(_build_root_logger("vcenter_access"))
