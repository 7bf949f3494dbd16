"""
Shared utilities for FOLIO.

Common functionality used across contexts:
- Logging setup and pipeline events
- Timestamps
- Identifier and text helpers
"""

from folio.utils.timestamp import now, now_exact, today

__all__ = ["now", "now_exact", "today"]
