"""
Database init - Exports for models
"""

from .base import Base, TimestampMixin

__all__ = ["Base", "TimestampMixin"]
