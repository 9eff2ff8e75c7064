"""Application route blueprints."""

from .enrollment import EXTENSION_KEY, enrollment_bp

__all__ = ["enrollment_bp", "EXTENSION_KEY"]
