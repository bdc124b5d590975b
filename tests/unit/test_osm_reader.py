"""
Unit Tests for the OSM Reader.

Tests decoding of OSM XML into entity records through pyosmium.
"""

import subprocess
import sys
from pathlib import Path as FilePath

import pytest

from refcheck.config.settings import Settings
from refcheck.graph.schema import EntityKind, Path, Point, Relation, RelationMember
from refcheck.io.osm_reader import InputError, InputFormatError, read_entities

REPO_ROOT = FilePath(__file__).resolve().parents[2]


class TestReadEntities:
    """Test cases for read_entities()."""

    def test_reads_all_kinds_in_order(self, sample_osm_file: FilePath) -> None:
        """Test that nodes, ways and relations become entity records."""
        entities = list(read_entities(str(sample_osm_file)))

        assert entities == [
            Point(1),
            Point(2),
            Path(10, (1, 2, 3)),
            Relation(
                100,
                (
                    RelationMember(EntityKind.POINT, 1),
                    RelationMember(EntityKind.PATH, 11),
                    RelationMember(EntityKind.RELATION, 200),
                ),
            ),
        ]

    def test_explicit_format(self, tmp_path: FilePath, sample_osm_xml: str) -> None:
        """Test that an explicit format overrides the file name."""
        path = tmp_path / "data.bin"
        path.write_text(sample_osm_xml, encoding="utf-8")

        entities = list(read_entities(str(path), input_format="osm"))

        assert len(entities) == 4

    def test_stdin_requires_format(self) -> None:
        """Test that STDIN without a format is a configuration error."""
        with pytest.raises(InputFormatError, match="input-format"):
            next(read_entities("-"))

    def test_stdin_with_format(
        self, test_settings: Settings, sample_osm_xml: str
    ) -> None:
        """Test reading OSM XML piped through STDIN of a separate process."""
        result = subprocess.run(
            [sys.executable, "-m", "refcheck", "-r", "-i", "-F", "osm"],
            input=sample_osm_xml,
            capture_output=True,
            text=True,
            cwd=REPO_ROOT,
            timeout=60,
        )

        assert result.returncode == 1, result.stderr
        assert result.stdout.splitlines() == ["n3 in w10", "w11 in r100", "r200 in r100"]
        assert "There are 2 nodes, 1 ways, and 1 relations in this file." in result.stderr

    def test_missing_file(self, tmp_path: FilePath) -> None:
        """Test that a nonexistent path is reported before decoding."""
        with pytest.raises(InputError, match="not found") as exc_info:
            next(read_entities(str(tmp_path / "nope.osm.pbf")))

        assert not isinstance(exc_info.value, InputFormatError)
