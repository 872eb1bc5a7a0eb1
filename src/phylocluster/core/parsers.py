"""
Parsers for the inputs of tree building.

Sequence files are read with BioPython and become NamedItems carrying the
sequence as payload. Distance matrices are read with Polars and handed to
the builder as labelled pandas DataFrames.
"""

from __future__ import annotations

import gzip
import logging
from pathlib import Path

import pandas as pd
import polars as pl

from phylocluster.core.exceptions import EmptySequenceFileError
from phylocluster.models.items import NamedItem

logger = logging.getLogger(__name__)


def extract_item_name(record_id: str) -> str:
    """
    Extract the item name from a FASTA record identifier.

    Identifiers are pipe-delimited database references; the name is the
    last field.

    Example:
        >>> extract_item_name("gi|5524211|gb|AAD44166.1|cytb_bison")
        'cytb_bison'
        >>> extract_item_name("human")
        'human'
    """
    return record_id.split("|")[-1].strip()


def load_sequence_items(path: Path) -> list[NamedItem]:
    """
    Load named sequences from a FASTA file (optionally gzipped).

    The item name is the last ``|``-separated field of each record
    identifier. Records whose name is empty are skipped.

    Args:
        path: Path to the FASTA file.

    Returns:
        One NamedItem per named record, in file order, with the sequence
        string as payload.

    Raises:
        FileNotFoundError: If the file does not exist.
        EmptySequenceFileError: If no named records are found.
    """
    from Bio import SeqIO

    if not path.exists():
        msg = f"Sequence file not found: {path}"
        raise FileNotFoundError(msg)

    opener = gzip.open if path.suffix == ".gz" else open
    items: list[NamedItem] = []
    skipped = 0
    with opener(path, "rt") as handle:
        for record in SeqIO.parse(handle, "fasta"):
            name = extract_item_name(record.id)
            if not name:
                skipped += 1
                continue
            items.append(NamedItem(name=name, payload=str(record.seq)))

    if skipped:
        logger.warning(f"Skipped {skipped} records without a name in {path}")

    if not items:
        raise EmptySequenceFileError(str(path))

    logger.info(f"Loaded {len(items)} sequences from {path}")
    return items


class DistanceMatrixParser:
    """
    Parser for precomputed pairwise distance matrices.

    Expected format:
    - CSV or TSV with item names as first column and header row
    - Square matrix of non-negative distances; the diagonal is ignored
    """

    def __init__(self, matrix_path: Path) -> None:
        """
        Initialize distance matrix parser.

        Args:
            matrix_path: Path to distance matrix file (CSV/TSV, optionally gzipped)
        """
        self.matrix_path = matrix_path
        self._validate_path()

    def _validate_path(self) -> None:
        """Ensure matrix file exists."""
        if not self.matrix_path.exists():
            msg = f"Distance matrix file not found: {self.matrix_path}"
            raise FileNotFoundError(msg)

    def parse(self) -> pd.DataFrame:
        """
        Parse the matrix into a labelled DataFrame.

        Returns:
            DataFrame indexed by item name with one column per item.

        Raises:
            ValueError: If the file holds no rows.
        """
        path_str = str(self.matrix_path)
        separator = "\t" if path_str.endswith((".tsv", ".tsv.gz")) else ","

        df = pl.read_csv(self.matrix_path, separator=separator, has_header=True)
        if df.is_empty():
            msg = f"Distance matrix is empty: {self.matrix_path}"
            raise ValueError(msg)

        names = [str(name) for name in df.get_column(df.columns[0]).to_list()]
        values = df.select(df.columns[1:]).cast(pl.Float64, strict=False)

        missing = values.null_count().sum_horizontal().item()
        if missing:
            logger.warning(f"{missing} cells of {self.matrix_path} are empty or non-numeric")

        return pd.DataFrame(
            values.to_numpy(),
            index=names,
            columns=[str(col) for col in values.columns],
        )
