"""
Built-in collectors.
"""
from .system import SystemCollector

__all__ = ['SystemCollector']
