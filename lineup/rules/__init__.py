"""Built-in rules."""

from .base import Rule
from .registry import RuleRegistry, builtin_registry

__all__ = ["Rule", "RuleRegistry", "builtin_registry"]
