"""Scribe: audit-interception layer for async entity stores.

Wraps any create/update/delete capable store and records an immutable
trail of who changed what, when, and its before/after state.
"""

__version__ = "0.1.0"
