"""Stile: design-system adherence scanning for front-end source trees."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
