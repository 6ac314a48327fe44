"""
structdiff.errors — Exceptions raised by the patch side of the library.

`diff`, `lcs` and `is_equal` are total: they never raise for well-formed
input.  Only applying a diff can fail, and only when the diff's shape
cannot describe the value it is applied to (a hand-built or stale diff).
"""


class StructDiffError(Exception):
    """Base class for all structdiff errors."""


class MalformedDiffError(StructDiffError, ValueError):
    """A diff does not fit the value it is being applied to."""

    def __init__(self, message: str, path: tuple = ()):
        self.path = path
        if path:
            path_str = ".".join(str(p) for p in path)
            message = f"{message} (at {path_str})"
        super().__init__(message)
