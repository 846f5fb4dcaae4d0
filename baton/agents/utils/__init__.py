"""
Utility modules for the agents SDK.

``serializer`` is imported from its module directly, it depends on the
orchestrator package.
"""

from .strings import to_snake_case, strip_suffix

__all__ = ["to_snake_case", "strip_suffix"]
