"""Selection and access policies."""

from .allowlist import root_allowed
from .matcher import AnyOf, Literal, Pattern, matches, to_rule

__all__ = ["AnyOf", "Literal", "Pattern", "matches", "root_allowed", "to_rule"]
