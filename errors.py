"""
Error types raised by the heavy-light decomposition package.

Every precondition on the public operations is checked at the call boundary
and reported with one of these classes instead of corrupting state.
"""


class HLDError(Exception):
    """Base class for all decomposition errors."""


class InvalidIndexError(HLDError, IndexError):
    """A node id or array position lies outside its valid range."""


class InvalidStateError(HLDError, RuntimeError):
    """An operation was called in the wrong lifecycle state."""


class MalformedTreeError(HLDError, ValueError):
    """The edge set does not form a single tree spanning every node."""
