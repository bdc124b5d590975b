"""
Pytest Configuration and Shared Fixtures.

This module provides shared fixtures for testing refcheck.
"""

from collections.abc import Generator
from pathlib import Path as FilePath
from unittest.mock import patch

import pytest

from refcheck.config.settings import Settings, get_settings
from refcheck.graph.schema import Entity, EntityKind, Path, Point, Relation, RelationMember


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def test_settings() -> Generator[Settings, None, None]:
    """Provide settings built from a controlled environment."""
    with patch.dict(
        "os.environ",
        {
            "REFCHECK_SHOW_IDS": "false",
            "REFCHECK_CHECK_RELATIONS": "false",
            "OBSERVABILITY_LOG_FORMAT": "console",
        },
    ):
        # Clear cache and get fresh settings
        get_settings.cache_clear()
        yield get_settings()
    get_settings.cache_clear()


# =============================================================================
# Entity Stream Fixtures
# =============================================================================


def make_relation(relation_id: int, *members: tuple[str, int]) -> Relation:
    """Build a relation from (prefix, ref) pairs such as ("n", 1)."""
    return Relation(
        relation_id,
        tuple(RelationMember(EntityKind.from_prefix(prefix), ref) for prefix, ref in members),
    )


@pytest.fixture
def relation_builder():
    """Expose make_relation to tests."""
    return make_relation


@pytest.fixture
def path_stream() -> list[Entity]:
    """Points 1 and 2, and a path that also references the missing point 3."""
    return [Point(1), Point(2), Path(10, (1, 2, 3))]


@pytest.fixture
def relation_stream() -> list[Entity]:
    """Relation 100 references a missing point and a missing relation."""
    return [
        Point(1),
        make_relation(100, ("n", 1), ("n", 2), ("r", 200)),
        make_relation(300),
    ]


@pytest.fixture
def clean_stream() -> list[Entity]:
    """A stream in which every reference resolves."""
    return [
        Point(1),
        Point(2),
        Point(3),
        Path(10, (1, 2)),
        Path(11, (2, 3, 2)),
        make_relation(100, ("n", 1), ("w", 10), ("r", 101)),
        make_relation(101, ("w", 11)),
    ]


# =============================================================================
# OSM File Fixtures
# =============================================================================


SAMPLE_OSM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="refcheck-tests">
  <node id="1" version="1" lat="0.0" lon="0.0"/>
  <node id="2" version="1" lat="0.0" lon="0.1"/>
  <way id="10" version="1">
    <nd ref="1"/>
    <nd ref="2"/>
    <nd ref="3"/>
  </way>
  <relation id="100" version="1">
    <member type="node" ref="1" role=""/>
    <member type="way" ref="11" role="outer"/>
    <member type="relation" ref="200" role=""/>
  </relation>
</osm>
"""

CLEAN_OSM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="refcheck-tests">
  <node id="1" version="1" lat="0.0" lon="0.0"/>
  <node id="2" version="1" lat="0.0" lon="0.1"/>
  <way id="10" version="1">
    <nd ref="1"/>
    <nd ref="2"/>
  </way>
  <relation id="100" version="1">
    <member type="way" ref="10" role=""/>
  </relation>
</osm>
"""


@pytest.fixture
def sample_osm_xml() -> str:
    """Raw OSM XML with dangling references of every kind."""
    return SAMPLE_OSM_XML


@pytest.fixture
def sample_osm_file(tmp_path: FilePath) -> FilePath:
    """OSM XML file with dangling references of every kind."""
    path = tmp_path / "sample.osm"
    path.write_text(SAMPLE_OSM_XML, encoding="utf-8")
    return path


@pytest.fixture
def clean_osm_file(tmp_path: FilePath) -> FilePath:
    """OSM XML file in which every reference resolves."""
    path = tmp_path / "clean.osm"
    path.write_text(CLEAN_OSM_XML, encoding="utf-8")
    return path
