"""
Custom exceptions with actionable guidance.

Provides specific error types for tree building, querying, rendering,
and the input collaborators, each with helpful suggestions for resolution.
"""

from __future__ import annotations


class PhyloClusterError(Exception):
    """Base exception for phylocluster errors."""

    def __init__(self, message: str, suggestion: str | None = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.full_message)

    @property
    def full_message(self) -> str:
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


class PreconditionViolationError(PhyloClusterError):
    """Base class for invalid arguments passed to the builder or renderers."""



class EmptyInputError(PreconditionViolationError):
    """Raised when the builder receives no items."""

    def __init__(self) -> None:
        super().__init__(
            message="Cannot build a tree from an empty set of items",
            suggestion=(
                "Provide at least one named item. If the items came from a "
                "sequence file, check that it contains named FASTA records."
            ),
        )


class InvalidItemNameError(PreconditionViolationError):
    """Raised when an item name is empty, duplicated, or contains the separator."""

    def __init__(self, name: str, reason: str):
        super().__init__(
            message=f"Invalid item name {name!r}: {reason}",
            suggestion=(
                "Item names must be non-empty, unique, and must not contain the "
                "cluster label separator. Rename the offending items or choose "
                "another separator in the build configuration."
            ),
        )
        self.name = name
        self.reason = reason


class InvalidDistanceError(PreconditionViolationError):
    """Raised when the distance function returns a negative, NaN, or infinite value."""

    def __init__(self, name_a: str, name_b: str, value: float):
        super().__init__(
            message=f"Invalid distance between {name_a!r} and {name_b!r}: {value}",
            suggestion=(
                "Distances must be finite, non-negative real numbers. Saturated "
                "sequence pairs under the Jukes-Cantor metric have no finite "
                "distance; try the p_distance or hamming metric instead."
            ),
        )
        self.value = value


class InvalidPrintWidthError(PreconditionViolationError):
    """Raised when the indented renderer gets a non-positive print width."""

    def __init__(self, width: int):
        super().__init__(
            message=f"Print width must be a positive integer, got {width}",
            suggestion="Use a width such as 80 for terminal output.",
        )
        self.width = width


class InvalidOperationError(PhyloClusterError):
    """Raised when a node accessor is used on the wrong kind of node."""

    def __init__(self, operation: str, label: str):
        super().__init__(message=f"'{operation}' is not defined for node {label!r}")
        self.operation = operation


class DistanceMatrixError(PhyloClusterError):
    """Base class for distance matrix errors."""



class DistanceMatrixNotSquareError(DistanceMatrixError):
    """Raised when a distance matrix is not square."""

    def __init__(self, rows: int, cols: int):
        super().__init__(
            message=f"Distance matrix is not square: {rows} rows x {cols} columns",
            suggestion=(
                "The first column must hold item names and the header row must "
                "list the same names in the same order."
            ),
        )
        self.rows = rows
        self.cols = cols


class DistanceMatrixRowColumnMismatchError(DistanceMatrixError):
    """Raised when row and column names don't match."""

    def __init__(self, missing_in_rows: set[str], missing_in_cols: set[str]):
        message = "Distance matrix row and column names don't match"
        details = []
        if missing_in_rows:
            details.append(f"Missing in rows: {', '.join(sorted(missing_in_rows)[:5])}")
        if missing_in_cols:
            details.append(f"Missing in columns: {', '.join(sorted(missing_in_cols)[:5])}")

        super().__init__(
            message=f"{message}. {'; '.join(details)}",
            suggestion="Every item must appear both as a row and as a column.",
        )


class DistanceMatrixValueError(DistanceMatrixError):
    """Raised when distance values are negative or missing."""

    def __init__(self, invalid_values: list[tuple[str, str, float]]):
        examples = invalid_values[:3]
        example_str = ", ".join(f"{a}-{b}: {val}" for a, b, val in examples)
        super().__init__(
            message=f"Distance matrix contains invalid values (must be >= 0): {example_str}",
            suggestion=(
                "Fill in every pairwise distance. Negative or empty cells "
                "indicate a malformed matrix."
            ),
        )


class DistanceMatrixAsymmetryError(DistanceMatrixError):
    """Raised when d(a, b) differs from d(b, a)."""

    def __init__(self, name_a: str, name_b: str, forward: float, backward: float):
        super().__init__(
            message=(
                f"Distance matrix is not symmetric: d({name_a}, {name_b}) = {forward} "
                f"but d({name_b}, {name_a}) = {backward}"
            ),
            suggestion="Regenerate the matrix so that both triangles agree.",
        )


class SequenceFileError(PhyloClusterError):
    """Base class for sequence file errors."""



class EmptySequenceFileError(SequenceFileError):
    """Raised when a sequence file yields no named records."""

    def __init__(self, path: str):
        super().__init__(
            message=f"Sequence file is empty or contains no named records: {path}",
            suggestion=(
                "Check that the file is FASTA formatted, with header lines "
                "starting with '>' followed by the sequence lines."
            ),
        )


class SequenceLengthMismatchError(PhyloClusterError):
    """Raised when a per-site metric is applied to sequences of different lengths."""

    def __init__(self, length_a: int, length_b: int):
        super().__init__(
            message=f"Sequences have different lengths: {length_a} vs {length_b}",
            suggestion="Per-site distance metrics need aligned sequences of equal length.",
        )
        self.length_a = length_a
        self.length_b = length_b
