"""
Exception taxonomy for the micro-savings engine.

Only two conditions are ever raised:

* :class:`ParseError` – a timestamp or number could not be interpreted.
  Aborts the whole call; there are no partial results.
* :class:`ConfigurationError` – the request itself is unusable (missing
  fields, empty lists, non-positive wage or age).  Raised by the payload
  layer before any service runs.

Per-transaction validation failures are *data*, not exceptions: they are
returned as :class:`~microsave.models.schemas.InvalidTransaction` records.
"""

from __future__ import annotations


class MicrosaveError(Exception):
    """Base class for every error raised by this package."""


class ParseError(MicrosaveError, ValueError):
    """A timestamp or numeric field matches none of the accepted shapes."""


class ConfigurationError(MicrosaveError, ValueError):
    """A request was rejected before reaching the core services."""
