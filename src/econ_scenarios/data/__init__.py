"""Historical series loading."""

from econ_scenarios.data.loader import DataLoadError, load_series

__all__ = [
    "DataLoadError",
    "load_series",
]
