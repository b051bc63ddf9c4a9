"""Tests for learning a TerrainSample."""

import pytest

from loom.core import CharTile, Position
from loom.generation import (
    InvalidSampleShapeError,
    ReservedTileError,
    TerrainSample,
    bundled_sample_path,
    bundled_samples,
    load_sample,
    read_sample_text,
)
from loom.tests.helpers import tiles


class TestTileset:
    """Test tileset deduplication."""

    def test_checker_tileset(self, checker_sample):
        """AB/BA has tiles A then B, in first-seen order."""
        assert checker_sample.tileset == (CharTile("A"), CharTile("B"))

    def test_tileset_size_is_distinct_count(self, coast_sample):
        """One entry per distinct tile value."""
        assert len(coast_sample.tileset) == 3
        assert len(coast_sample) == 3

    def test_first_seen_order_is_row_major(self):
        """Order follows rows left to right, then down."""
        sample = TerrainSample(tiles("ba", "cb"))
        assert [tile.value for tile in sample.tileset] == ["b", "a", "c"]

    def test_map_resolves_to_sample(self, coast_sample):
        """Every map entry points back at the original value."""
        rows = tiles("~~~~", "~::~", ":..:", "....")
        for y, row in enumerate(rows):
            for x, tile in enumerate(row):
                assert coast_sample.tileset[coast_sample.map[y][x]] == tile

    def test_map_has_sample_shape(self, coast_sample):
        """Map mirrors the sample's rows and columns."""
        assert len(coast_sample.map) == 4
        assert all(len(row) == 4 for row in coast_sample.map)

    def test_dedup_uses_equality(self):
        """Tiles are merged by ==, so unhashable tiles work."""

        class ListTile:
            def __init__(self, value):
                self.parts = [value]

            def __eq__(self, other):
                return isinstance(other, ListTile) and self.parts == other.parts

            __hash__ = None

        sample = TerrainSample([[ListTile(1), ListTile(2)], [ListTile(1), ListTile(1)]])
        assert len(sample.tileset) == 2
        assert sample.map == ((0, 1), (0, 0))


class TestConstraints:
    """Test adjacency constraint extraction."""

    def test_checker_constraints(self, checker_sample):
        """A only ever touches B and B only ever touches A."""
        assert checker_sample.constraints == ((1,), (0,))

    def test_one_constraint_set_per_tile(self, coast_sample):
        """constraints and tileset line up."""
        assert len(coast_sample.constraints) == len(coast_sample.tileset)

    def test_coast_constraints(self, coast_sample):
        """Water touches water and coast; land touches land and coast."""
        water, coast, land = 0, 1, 2
        assert coast_sample.constraints[water] == (water, coast)
        assert coast_sample.constraints[coast] == (water, coast, land)
        assert coast_sample.constraints[land] == (coast, land)

    def test_constraints_are_sound_and_symmetric(self, coast_sample):
        """Every observed neighbour pair is allowed, both ways round."""
        for y in range(coast_sample.height):
            for x in range(coast_sample.width):
                tile_index = coast_sample.map[y][x]
                for neighbor in Position(x, y).neighbors(coast_sample.width, coast_sample.height):
                    neighbor_index = coast_sample.map[neighbor.y][neighbor.x]
                    assert neighbor_index in coast_sample.constraints[tile_index]
                    assert tile_index in coast_sample.constraints[neighbor_index]

    def test_constraints_are_valid_indices(self, coast_sample):
        """No constraint refers outside the tileset."""
        for allowed in coast_sample.constraints:
            assert all(0 <= index < len(coast_sample.tileset) for index in allowed)

    def test_no_wraparound(self):
        """Opposite edges are not neighbours."""
        sample = TerrainSample(tiles("abc"))
        a, b, c = 0, 1, 2
        assert sample.constraints[a] == (b,)
        assert c not in sample.constraints[a]

    def test_single_cell_sample(self):
        """A 1x1 sample has one tile with no neighbours."""
        sample = TerrainSample(tiles("x"))
        assert sample.tileset == (CharTile("x"),)
        assert sample.constraints == ((),)

    def test_allows(self, checker_sample):
        """allows() reads the constraint table."""
        assert checker_sample.allows(0, 1)
        assert not checker_sample.allows(0, 0)


class TestAccessors:
    """Test lookup helpers."""

    def test_get(self, checker_sample):
        """get() returns the tile, or None when out of range."""
        assert checker_sample.get(1) == CharTile("B")
        assert checker_sample.get(2) is None
        assert checker_sample.get(-1) is None

    def test_get_tile_index(self):
        """get_tile_index(x, y) reads column x of row y."""
        sample = TerrainSample(tiles("ab", "cd"))
        assert sample.get_tile_index(1, 0) == 1  # b
        assert sample.get_tile_index(0, 1) == 2  # c
        assert sample.get_tile_index(2, 0) is None

    def test_neighbors_counts(self, coast_sample):
        """Corners give 2 neighbours, edges 3, interior 4."""
        assert len(coast_sample.neighbors(0, 0)) == 2
        assert len(coast_sample.neighbors(1, 0)) == 3
        assert len(coast_sample.neighbors(1, 1)) == 4

    def test_dimensions(self):
        """width is columns, height is rows."""
        sample = TerrainSample(tiles("abc", "def"))
        assert (sample.width, sample.height) == (3, 2)


class TestShapeValidation:
    """Test rejection of malformed samples."""

    def test_empty_sample(self):
        """No rows is an error."""
        with pytest.raises(InvalidSampleShapeError):
            TerrainSample([])

    def test_empty_row(self):
        """A zero-width sample is an error."""
        with pytest.raises(InvalidSampleShapeError):
            TerrainSample([[]])

    def test_ragged_rows(self):
        """Rows of different lengths are an error that names the row."""
        with pytest.raises(InvalidSampleShapeError) as exc_info:
            TerrainSample(tiles("abc", "ab"))
        assert exc_info.value.row == 1


class TestReadingSamples:
    """Test parsing and loading sample text."""

    def test_read_sample_text(self):
        """One row per line, one tile per character."""
        rows = read_sample_text("ab\ncd\n")
        assert rows == tiles("ab", "cd")

    def test_trailing_blank_lines_ignored(self):
        """Blank lines at the end of a file are not rows."""
        assert read_sample_text("ab\nba\n\n\n") == tiles("ab", "ba")

    def test_windows_line_endings(self):
        """\\r\\n line endings are handled."""
        assert read_sample_text("ab\r\nba\r\n") == tiles("ab", "ba")

    def test_space_is_reserved(self):
        """The empty placeholder may not be a sample tile."""
        with pytest.raises(ReservedTileError) as exc_info:
            read_sample_text("ab\na \n")
        assert exc_info.value.position == Position(1, 1)

    def test_trailing_row_of_spaces_is_reserved(self):
        """Only empty lines are dropped; a row of spaces is still checked."""
        with pytest.raises(ReservedTileError) as exc_info:
            read_sample_text("ab\nba\n  \n")
        assert exc_info.value.position == Position(0, 2)

    def test_empty_text(self):
        """Empty text is not a sample."""
        with pytest.raises(InvalidSampleShapeError):
            read_sample_text("")

    def test_ragged_text(self):
        """Lines of different lengths are rejected."""
        with pytest.raises(InvalidSampleShapeError):
            read_sample_text("abc\nab\n")

    def test_from_text(self):
        """TerrainSample.from_text parses and learns in one go."""
        sample = TerrainSample.from_text("AB\nBA\n")
        assert sample.constraints == ((1,), (0,))

    def test_load_sample(self, temp_data_dir):
        """load_sample reads a UTF-8 file."""
        path = temp_data_dir / "sample.txt"
        path.write_text("≈~\n~.\n", encoding="utf-8")
        sample = load_sample(path)
        assert [tile.value for tile in sample.tileset] == ["≈", "~", "."]

    def test_load_missing_file(self, temp_data_dir):
        """A missing file surfaces as an OSError."""
        with pytest.raises(OSError):
            load_sample(temp_data_dir / "missing.txt")

    def test_load_sample_with_bom(self, temp_data_dir):
        """A byte order mark from a Windows editor is not part of row 0."""
        path = temp_data_dir / "bom.txt"
        path.write_text("ab\nba\n", encoding="utf-8-sig")
        sample = load_sample(path)
        assert (sample.width, sample.height) == (2, 2)
        assert [tile.value for tile in sample.tileset] == ["a", "b"]


class TestBundledSamples:
    """Test the samples shipped with the package."""

    def test_bundled_samples_listed(self):
        """The bundled samples are discoverable by name."""
        names = bundled_samples()
        assert "islands" in names
        assert "checker" in names

    def test_bundled_samples_load(self):
        """Every bundled sample is a valid sample."""
        for name in bundled_samples():
            sample = load_sample(bundled_sample_path(name))
            assert len(sample.tileset) >= 1

    def test_unknown_bundled_sample(self):
        """Unknown names raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            bundled_sample_path("no-such-sample")
