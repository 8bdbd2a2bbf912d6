"""
Error kinds raised while evaluating a dissimilarity matrix.
"""


class StructuralError(ValueError):
    """Category structure, matrix shape or curve length is inconsistent."""


class InputTruncated(ValueError):
    """The matrix byte stream ended before N x N values were read."""

    def __init__(self, path: str, offset: int, expected: int):
        self.path = path
        self.offset = offset
        self.expected = expected
        super().__init__(
            f"file {path} has an incorrect size: data ends at byte {offset}, "
            f"expected {expected} bytes"
        )


class DegenerateClass(UserWarning):
    """A class too small to score; its entries are left out of averages."""
