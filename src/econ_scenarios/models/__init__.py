"""
Parameter sets and error taxonomy.

Provides:
- Vasicek1fParams, Vasicek2fParams, CIR1fParams (short rates)
- ILNParams, RSLNParams (equity returns)
- CAS-SOA presets
"""

from econ_scenarios.models.errors import InvalidInput
from econ_scenarios.models.params import (
    CAS_INFLATION_VAS1F,
    CAS_RATES_VAS2F,
    PARAMS_BY_MODEL,
    PRESETS,
    CIR1fParams,
    ILNParams,
    ParameterSet,
    RSLNParams,
    Vasicek1fParams,
    Vasicek2fParams,
    params_from_dict,
)

__all__ = [
    "InvalidInput",
    # Short rates
    "Vasicek1fParams",
    "Vasicek2fParams",
    "CIR1fParams",
    # Equity
    "ILNParams",
    "RSLNParams",
    # Registry
    "ParameterSet",
    "PARAMS_BY_MODEL",
    "params_from_dict",
    # Presets
    "CAS_INFLATION_VAS1F",
    "CAS_RATES_VAS2F",
    "PRESETS",
]
