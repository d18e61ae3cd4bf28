from __future__ import annotations

"""Subpackage aggregating the user administration route modules."""

__all__ = ["accounts", "products"]
