"""
Tests for ScenarioTable - scenarios/table.py.

Tests correctness of:
- Record layout (trial, time, value[, state])
- Time grid starting at dt
- Immutability
- Frame export and the time-0 opt-in
"""

import numpy as np
import pandas as pd
import pytest

from econ_scenarios.models.errors import InvalidInput
from econ_scenarios.scenarios.table import COLUMNS, ScenarioTable, frame_from_tables

DT = 1 / 12


@pytest.fixture
def table() -> ScenarioTable:
    """Two trials, three steps."""
    return ScenarioTable(values=np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]), dt=DT)


@pytest.fixture
def state_table() -> ScenarioTable:
    """Two trials, three steps, with regimes."""
    return ScenarioTable(
        values=np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]),
        dt=DT,
        states=np.array([[1, 0, 1], [0, 0, 1]]),
    )


class TestLayout:
    """Tests for shapes, times and records."""

    def test_length(self, table):
        """len = n_trials * n_steps."""
        assert len(table) == 6
        assert table.n_trials == 2
        assert table.n_steps == 3

    def test_times_start_at_dt(self, table):
        """Time 0 is not included."""
        np.testing.assert_allclose(table.times, [DT, 2 * DT, 3 * DT])

    def test_records_order(self, table):
        """Grouped by trial, time increasing."""
        records = table.records()
        assert [(r["trial"], r["value"]) for r in records] == [
            (1, 1.0), (1, 2.0), (1, 3.0), (2, 4.0), (2, 5.0), (2, 6.0)
        ]
        assert records[3]["time"] == pytest.approx(DT)

    def test_records_without_state(self, table):
        """No state key when the table carries no states."""
        assert set(table.records()[0]) == {"trial", "time", "value"}
        assert table.columns == ("trial", "time", "value")

    def test_records_with_state(self, state_table):
        """Every record carries state when states are present."""
        records = state_table.records()
        assert all(set(r) == set(COLUMNS) for r in records)
        assert [r["state"] for r in records] == [1, 0, 1, 0, 0, 1]

    def test_trial_is_one_indexed(self, table):
        """trial(1) is the first row."""
        np.testing.assert_array_equal(table.trial(2), [4.0, 5.0, 6.0])
        with pytest.raises(InvalidInput, match=r"trial must be in \[1, 2\]"):
            table.trial(0)

    def test_terminal_values(self, table):
        """Last value per trial."""
        np.testing.assert_array_equal(table.terminal_values, [3.0, 6.0])


class TestValidation:
    """Tests for construction checks."""

    def test_values_must_be_2d(self):
        """A flat vector is not a table."""
        with pytest.raises(InvalidInput, match="must be 2-D"):
            ScenarioTable(values=np.array([1.0, 2.0]), dt=DT)

    def test_dt_positive(self):
        """dt must be > 0."""
        with pytest.raises(InvalidInput, match="dt must be > 0"):
            ScenarioTable(values=np.zeros((1, 2)), dt=0.0)

    def test_states_shape(self):
        """States must match values."""
        with pytest.raises(InvalidInput, match="states shape"):
            ScenarioTable(values=np.zeros((2, 3)), dt=DT, states=np.zeros((2, 2), dtype=int))

    def test_states_binary(self):
        """States are 0 or 1."""
        with pytest.raises(InvalidInput, match="states must be 0 or 1"):
            ScenarioTable(values=np.zeros((1, 2)), dt=DT, states=np.array([[0, 2]]))


class TestImmutability:
    """Tables have no update API."""

    def test_values_read_only(self, table):
        """The backing array cannot be written."""
        with pytest.raises(ValueError):
            table.values[0, 0] = 99.0

    def test_source_array_not_aliased(self):
        """Mutating the input array does not change the table."""
        source = np.array([[1.0, 2.0]])
        table = ScenarioTable(values=source, dt=DT)
        source[0, 0] = 99.0
        assert table.values[0, 0] == 1.0

    def test_to_matrix_is_writable_copy(self, table):
        """to_matrix hands out a copy."""
        matrix = table.to_matrix()
        matrix[0, 0] = 99.0
        assert table.values[0, 0] == 1.0


class TestFrames:
    """Tests for to_frame, with_initial and frame_from_tables."""

    def test_to_frame_columns(self, table, state_table):
        """Long format with the record columns."""
        assert list(table.to_frame().columns) == ["trial", "time", "value"]
        frame = state_table.to_frame()
        assert list(frame.columns) == ["trial", "time", "value", "state"]
        assert len(frame) == 6

    def test_to_frame_matches_records(self, state_table):
        """Frame rows equal the records."""
        expected = pd.DataFrame(state_table.records())
        pd.testing.assert_frame_equal(state_table.to_frame(), expected, check_dtype=False)

    def test_with_initial(self, table):
        """Time-0 column prepended on request."""
        full = table.with_initial(0.5)
        assert full.n_steps == 4
        np.testing.assert_allclose(full.times, [0.0, DT, 2 * DT, 3 * DT])
        np.testing.assert_array_equal(full.trial(1), [0.5, 1.0, 2.0, 3.0])
        with pytest.raises(InvalidInput, match="already includes"):
            full.with_initial(0.5)

    def test_with_initial_states(self, state_table):
        """Initial regime prepended alongside."""
        full = state_table.with_initial(0.0, initial_state=1)
        np.testing.assert_array_equal(full.states[:, 0], [1, 1])

    def test_frame_from_tables(self, table):
        """Tables on one grid join into a wide frame."""
        doubled = ScenarioTable(values=table.values * 2, dt=DT)
        frame = frame_from_tables({"level": table, "double": doubled})
        assert list(frame.columns) == ["trial", "time", "level", "double"]
        np.testing.assert_array_equal(frame["double"], frame["level"] * 2)

    def test_frame_from_tables_grid_mismatch(self, table):
        """Different grids cannot be joined."""
        other = ScenarioTable(values=np.zeros((2, 2)), dt=DT)
        with pytest.raises(InvalidInput, match="does not share the time grid"):
            frame_from_tables({"a": table, "b": other})
