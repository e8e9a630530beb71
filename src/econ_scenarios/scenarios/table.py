"""
ScenarioTable: the tidy output contract shared by all simulators.

Long format, one record per (trial, time):

    trial : int >= 1
    time  : float, years (step * dt), first record at dt
    value : float
    state : int in {0, 1}, only present for regime-switching detail output

The initial value (time 0) is not included. Callers that want it use
``with_initial``. Tables are immutable; the backing arrays are read-only.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from econ_scenarios.models.errors import InvalidInput

#: Column order of the long format
COLUMNS: tuple[str, ...] = ("trial", "time", "value", "state")


def _frozen_copy(array: np.ndarray, dtype: Any) -> np.ndarray:
    out = np.array(array, dtype=dtype, copy=True)
    out.flags.writeable = False
    return out


@dataclass(frozen=True)
class ScenarioTable:
    """
    Simulated paths in trial-major layout.

    Attributes
    ----------
    values : np.ndarray
        Shape (n_trials, n_steps)
    dt : float
        Step size in years
    states : np.ndarray, optional
        Regime per (trial, step), same shape as values
    first_step : int
        Step index of the first column (1 for simulator output, 0 once the
        initial value has been prepended)

    Examples
    --------
    >>> table = ScenarioTable(values=np.array([[0.01, 0.02]]), dt=1/12)
    >>> table.records()[0]
    {'trial': 1, 'time': 0.0833..., 'value': 0.01}
    """

    values: np.ndarray
    dt: float
    states: np.ndarray | None = None
    first_step: int = 1

    def __post_init__(self) -> None:
        """Validate shapes and freeze the backing arrays."""
        values = np.asarray(self.values, dtype=float)
        if values.ndim != 2:
            raise InvalidInput(
                f"CRITICAL: values must be 2-D (n_trials, n_steps), got shape {values.shape}"
            )
        if self.dt <= 0:
            raise InvalidInput(f"CRITICAL: dt must be > 0, got {self.dt}")
        if self.first_step < 0:
            raise InvalidInput(f"CRITICAL: first_step must be >= 0, got {self.first_step}")
        # Frozen dataclass workaround: use object.__setattr__
        object.__setattr__(self, "values", _frozen_copy(values, float))

        if self.states is not None:
            states = np.asarray(self.states)
            if states.shape != values.shape:
                raise InvalidInput(
                    f"CRITICAL: states shape {states.shape} must match values shape {values.shape}"
                )
            if not np.isin(states, (0, 1)).all():
                raise InvalidInput("CRITICAL: states must be 0 or 1")
            object.__setattr__(self, "states", _frozen_copy(states, np.int8))

    @property
    def n_trials(self) -> int:
        """Number of trials."""
        return self.values.shape[0]

    @property
    def n_steps(self) -> int:
        """Number of time points per trial."""
        return self.values.shape[1]

    @property
    def has_state(self) -> bool:
        """Whether records carry a regime state."""
        return self.states is not None

    @property
    def times(self) -> np.ndarray:
        """Time points in years, shape (n_steps,)."""
        return (np.arange(self.n_steps) + self.first_step) * self.dt

    @property
    def columns(self) -> tuple[str, ...]:
        """Record field names."""
        return COLUMNS if self.has_state else COLUMNS[:3]

    @property
    def terminal_values(self) -> np.ndarray:
        """Last value of every trial."""
        return self.values[:, -1]

    def __len__(self) -> int:
        return self.values.size

    def to_matrix(self) -> np.ndarray:
        """Writable copy of the values, shape (n_trials, n_steps)."""
        return self.values.copy()

    def trial(self, trial: int) -> np.ndarray:
        """
        Values of one trial (1-indexed).

        Raises
        ------
        InvalidInput
            If trial is outside [1, n_trials]
        """
        if not 1 <= trial <= self.n_trials:
            raise InvalidInput(f"CRITICAL: trial must be in [1, {self.n_trials}], got {trial}")
        return self.values[trial - 1]

    def records(self) -> list[dict[str, int | float]]:
        """
        Flat records in trial-major, time-increasing order.

        The ``state`` key is absent when the table carries no states.
        """
        times = self.times
        out: list[dict[str, int | float]] = []
        for i in range(self.n_trials):
            for j in range(self.n_steps):
                record: dict[str, int | float] = {
                    "trial": i + 1,
                    "time": float(times[j]),
                    "value": float(self.values[i, j]),
                }
                if self.states is not None:
                    record["state"] = int(self.states[i, j])
                out.append(record)
        return out

    def to_frame(self) -> pd.DataFrame:
        """
        Long-format DataFrame with columns trial, time, value[, state].

        This is the shape the summarization and plotting consumers group by
        ``time``.
        """
        data: dict[str, np.ndarray] = {
            "trial": np.repeat(np.arange(1, self.n_trials + 1), self.n_steps),
            "time": np.tile(self.times, self.n_trials),
            "value": self.values.ravel(),
        }
        if self.states is not None:
            data["state"] = self.states.ravel().astype(int)
        return pd.DataFrame(data, columns=list(self.columns))

    def with_initial(self, initial_value: float, initial_state: int = 0) -> "ScenarioTable":
        """
        Copy with a time-0 column prepended to every trial.

        Parameters
        ----------
        initial_value : float
            Level at time 0 (e.g. r0, or 0.0 for cumulative returns)
        initial_state : int
            Regime at time 0, used only when the table carries states

        Raises
        ------
        InvalidInput
            If the table already starts at time 0
        """
        if self.first_step == 0:
            raise InvalidInput("CRITICAL: table already includes the initial value")
        column = np.full((self.n_trials, 1), float(initial_value))
        states = None
        if self.states is not None:
            states = np.hstack([np.full((self.n_trials, 1), initial_state), self.states])
        return ScenarioTable(
            values=np.hstack([column, self.values]),
            dt=self.dt,
            states=states,
            first_step=self.first_step - 1,
        )


def frame_from_tables(tables: dict[str, ScenarioTable]) -> pd.DataFrame:
    """
    Wide DataFrame joining several tables on (trial, time).

    The first table contributes its own ``value`` (renamed to its key) and
    its ``state`` column if present; the others contribute their values.

    Raises
    ------
    InvalidInput
        If the tables do not share a grid
    """
    if not tables:
        raise InvalidInput("CRITICAL: need at least one table")
    names = list(tables)
    base = tables[names[0]]
    frame = base.to_frame().rename(columns={"value": names[0]})
    for name in names[1:]:
        table = tables[name]
        if table.values.shape != base.values.shape or table.first_step != base.first_step:
            raise InvalidInput(f"CRITICAL: table '{name}' does not share the time grid")
        frame[name] = table.values.ravel()
    return frame
