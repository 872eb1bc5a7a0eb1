"""
Unit tests for input parsers.

Tests FASTA loading and DistanceMatrixParser including:
- Item name extraction from pipe-delimited identifiers
- Gzipped input
- Edge cases (missing files, empty files, unnamed records)
"""

from __future__ import annotations

import gzip
import logging
from pathlib import Path

import pandas as pd
import pytest

from phylocluster.core.exceptions import EmptySequenceFileError, SequenceFileError
from phylocluster.core.parsers import (
    DistanceMatrixParser,
    extract_item_name,
    load_sequence_items,
)
from tests.factories import DistanceDataFactory


class TestExtractItemName:
    def test_pipe_delimited(self):
        assert extract_item_name("gi|5524211|gb|cytb_bison") == "cytb_bison"

    def test_plain_identifier(self):
        assert extract_item_name("human") == "human"

    def test_trailing_pipe_gives_empty_name(self):
        assert extract_item_name("gi|789|") == ""


class TestLoadSequenceItems:
    def test_names_and_order(self, species_fasta):
        items = load_sequence_items(species_fasta)
        assert [item.name for item in items] == ["human", "chimp", "mouse", "fish"]

    def test_multiline_sequences_joined(self, species_fasta):
        items = load_sequence_items(species_fasta)
        assert items[0].payload == "ACGTACGTACGTACGTACGT"
        assert len(items[1].payload) == 20

    def test_unnamed_records_skipped(self, tmp_path, caplog):
        path = tmp_path / "partial.fasta"
        path.write_text(">gi|123|gb|alpha\nACGT\n>gi|789|\nACGA\n>beta\nTCGA\n")
        with caplog.at_level(logging.WARNING, logger="phylocluster"):
            items = load_sequence_items(path)
        assert [item.name for item in items] == ["alpha", "beta"]
        assert "Skipped 1 records" in caplog.text

    def test_gzipped_input(self, tmp_path):
        sequences = DistanceDataFactory(seed=5).mutated_sequences(3, length=30)
        plain = DistanceDataFactory.write_fasta(tmp_path / "seqs.fasta", sequences)
        gz_path = tmp_path / "seqs.fasta.gz"
        with gzip.open(gz_path, "wt") as handle:
            handle.write(plain.read_text())

        items = load_sequence_items(gz_path)
        assert {item.name: item.payload for item in items} == sequences

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_sequence_items(tmp_path / "nonexistent.fasta")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.fasta"
        path.write_text("")
        with pytest.raises(EmptySequenceFileError) as exc_info:
            load_sequence_items(path)
        assert isinstance(exc_info.value, SequenceFileError)

    def test_only_unnamed_records(self, tmp_path):
        path = tmp_path / "unnamed.fasta"
        path.write_text(">gi|1|\nACGT\n")
        with pytest.raises(EmptySequenceFileError):
            load_sequence_items(path)


class TestDistanceMatrixParser:
    """Tests for DistanceMatrixParser."""

    def test_parser_file_not_found(self, tmp_path):
        """Should raise FileNotFoundError for missing file."""
        with pytest.raises(FileNotFoundError):
            DistanceMatrixParser(tmp_path / "nonexistent.csv")

    def test_parse_csv(self, abc_matrix_csv, abc_matrix):
        df = DistanceMatrixParser(abc_matrix_csv).parse()

        assert isinstance(df, pd.DataFrame)
        assert list(df.index) == ["A", "B", "C"]
        assert list(df.columns) == ["A", "B", "C"]
        assert df.loc["A", "C"] == 4.0
        pd.testing.assert_frame_equal(df, abc_matrix, check_names=False)

    def test_parse_tsv(self, tmp_path):
        path = tmp_path / "distances.tsv"
        path.write_text("name\tX\tY\nX\t0\t1.5\nY\t1.5\t0\n")

        df = DistanceMatrixParser(path).parse()
        assert df.loc["Y", "X"] == 1.5
        assert df.shape == (2, 2)

    def test_parse_gzipped_csv(self, tmp_path):
        path = tmp_path / "distances.csv.gz"
        with gzip.open(path, "wt") as handle:
            handle.write("name,X,Y\nX,0,3\nY,3,0\n")

        df = DistanceMatrixParser(path).parse()
        assert df.loc["X", "Y"] == 3.0

    def test_numeric_labels_become_strings(self, tmp_path):
        path = tmp_path / "numeric.csv"
        path.write_text("name,1,2\n1,0,2\n2,2,0\n")

        df = DistanceMatrixParser(path).parse()
        assert list(df.index) == ["1", "2"]
        assert list(df.columns) == ["1", "2"]

    def test_non_numeric_cells_warn(self, tmp_path, caplog):
        path = tmp_path / "bad.csv"
        path.write_text("name,X,Y\nX,0,abc\nY,abc,0\n")

        with caplog.at_level(logging.WARNING, logger="phylocluster"):
            df = DistanceMatrixParser(path).parse()
        assert df.isna().sum().sum() == 2
        assert "non-numeric" in caplog.text

    def test_empty_matrix(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("name,X,Y\n")

        with pytest.raises(ValueError, match="empty"):
            DistanceMatrixParser(path).parse()


def _write_matrix(path: Path, df: pd.DataFrame) -> Path:
    df.to_csv(path, index_label="name")
    return path


def test_factory_matrix_round_trips_through_parser(tmp_path):
    dataset = DistanceDataFactory(seed=3).random_dataset(5)
    path = _write_matrix(tmp_path / "random.csv", dataset.to_matrix())

    df = DistanceMatrixParser(path).parse()
    assert df.loc["T000", "T004"] == pytest.approx(dataset.distance("T000", "T004"))
