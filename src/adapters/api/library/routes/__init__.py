from __future__ import annotations

"""Subpackage aggregating the parts and vendor library route modules."""

__all__ = ["parts", "vendors", "awards"]
