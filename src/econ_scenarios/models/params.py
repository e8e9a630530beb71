"""
Parameter sets for the short-rate and equity return models.

[T1] Vasicek: dr = a(b - r)dt + v dW
[T1] CIR: dr = a(b - r)dt + v sqrt(r) dW
[T1] ILN: monthly log-returns i.i.d. Normal
[T1] RSLN: log-returns Normal(means[s], vols[s]), s a 2-state Markov chain

Parameter sets are immutable: calibration produces them, simulation only
reads them. Each serializes to a flat dict whose keys are the field names,
so presets stored as JSON objects round-trip unchanged.
"""

import math
import numbers
from dataclasses import asdict, dataclass
from typing import Any

from econ_scenarios.models.errors import InvalidInput


def _require_finite(name: str, value: float) -> None:
    if not isinstance(value, numbers.Real) or isinstance(value, bool):
        raise InvalidInput(f"CRITICAL: {name} must be numeric, got {value!r}")
    if not math.isfinite(value):
        raise InvalidInput(f"CRITICAL: {name} must be finite, got {value}")


def _require_vol(name: str, value: float) -> None:
    _require_finite(name, value)
    if value < 0:
        raise InvalidInput(f"CRITICAL: {name} must be >= 0, got {value}")


def _require_pair(name: str, value: Any) -> tuple[float, float]:
    try:
        pair = tuple(float(x) for x in value)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"CRITICAL: {name} must be a pair of numbers, got {value!r}") from e
    if len(pair) != 2:
        raise InvalidInput(f"CRITICAL: {name} must have exactly 2 entries, got {len(pair)}")
    return pair  # type: ignore[return-value]


# =============================================================================
# Short-Rate Models
# =============================================================================


@dataclass(frozen=True)
class Vasicek1fParams:
    """
    One-factor Vasicek parameters.

    Attributes
    ----------
    r0 : float
        Initial level
    a : float
        Mean reversion speed (annual). Positive expected, not enforced.
    b : float
        Mean reversion level
    v : float
        Annual volatility (>= 0)
    rmin : float, optional
        Floor applied to the level after each simulated step
    """

    r0: float
    a: float
    b: float = 0.0
    v: float = 0.0
    rmin: float | None = None

    def __post_init__(self) -> None:
        """Validate parameters."""
        _require_finite("r0", self.r0)
        _require_finite("a", self.a)
        _require_finite("b", self.b)
        _require_vol("v", self.v)
        if self.rmin is not None:
            _require_finite("rmin", self.rmin)

    @property
    def half_life(self) -> float:
        """Half-life of mean reversion in years."""
        if self.a > 0:
            return math.log(2) / self.a
        return math.inf

    def to_dict(self) -> dict[str, float | None]:
        """Convert to flat dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Vasicek1fParams":
        """Create from flat dictionary."""
        return cls(
            r0=d["r0"],
            a=d["a"],
            b=d.get("b", 0.0),
            v=d["v"],
            rmin=d.get("rmin"),
        )


@dataclass(frozen=True)
class Vasicek2fParams:
    """
    Two independent Vasicek factors whose simulated levels are summed.

    Attributes
    ----------
    short : Vasicek1fParams
        Short-term factor (usually mean-reverting to 0 with a floor)
    long : Vasicek1fParams
        Long-term factor
    """

    short: Vasicek1fParams
    long: Vasicek1fParams

    def __post_init__(self) -> None:
        """Validate parameters."""
        for name, factor in (("short", self.short), ("long", self.long)):
            if not isinstance(factor, Vasicek1fParams):
                raise InvalidInput(
                    f"CRITICAL: {name} must be Vasicek1fParams, got {type(factor).__name__}"
                )

    @property
    def r0(self) -> float:
        """Initial combined level."""
        return self.short.r0 + self.long.r0

    def to_dict(self) -> dict[str, dict[str, float | None]]:
        """Convert to nested dictionary for serialization."""
        return {"short": self.short.to_dict(), "long": self.long.to_dict()}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Vasicek2fParams":
        """
        Create from dictionary.

        Accepts ``short``/``long`` keys, or the ``param_short``/``param_long``
        keys used by older preset files.
        """
        short = d.get("short", d.get("param_short"))
        long = d.get("long", d.get("param_long"))
        if short is None or long is None:
            raise InvalidInput("CRITICAL: two-factor parameters need 'short' and 'long'")
        return cls(
            short=Vasicek1fParams.from_dict(short),
            long=Vasicek1fParams.from_dict(long),
        )


@dataclass(frozen=True)
class CIR1fParams:
    """
    One-factor Cox-Ingersoll-Ross parameters.

    Attributes
    ----------
    r0 : float
        Initial level
    a : float
        Mean reversion speed (annual)
    b : float
        Mean reversion level
    v : float
        Volatility scale of the sqrt(r) diffusion (>= 0)
    """

    r0: float
    a: float
    b: float
    v: float

    def __post_init__(self) -> None:
        """Validate parameters."""
        _require_finite("r0", self.r0)
        _require_finite("a", self.a)
        _require_finite("b", self.b)
        _require_vol("v", self.v)

    @property
    def feller_satisfied(self) -> bool:
        """[T1] Feller condition 2ab >= v² keeps the continuous process positive."""
        return 2 * self.a * self.b >= self.v**2

    def to_dict(self) -> dict[str, float]:
        """Convert to flat dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "CIR1fParams":
        """Create from flat dictionary."""
        return cls(r0=d["r0"], a=d["a"], b=d["b"], v=d["v"])


# =============================================================================
# Equity Models
# =============================================================================


@dataclass(frozen=True)
class ILNParams:
    """
    Independent lognormal equity parameters (annualized).

    Attributes
    ----------
    mean : float
        Annual arithmetic mean return (> -1)
    vol : float
        Annualized log-return volatility (>= 0)
    """

    mean: float
    vol: float

    def __post_init__(self) -> None:
        """Validate parameters."""
        _require_finite("mean", self.mean)
        _require_vol("vol", self.vol)
        if self.mean <= -1:
            raise InvalidInput(f"CRITICAL: mean must be > -1, got {self.mean}")

    def monthly_moments(self, dt: float) -> tuple[float, float]:
        """
        Per-step log-return mean and sigma.

        [T1] Inverts mean = exp((μ + σ²/2)/dt) - 1 and vol = σ/√dt:
            σ = vol·√dt
            μ = dt·ln(1 + mean) - σ²/2

        Parameters
        ----------
        dt : float
            Step size in years

        Returns
        -------
        tuple of float
            (mu, sigma) of the per-step log-return
        """
        sigma = self.vol * math.sqrt(dt)
        mu = dt * math.log1p(self.mean) - 0.5 * sigma**2
        return mu, sigma

    def to_dict(self) -> dict[str, float]:
        """Convert to flat dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "ILNParams":
        """Create from flat dictionary."""
        return cls(mean=d["mean"], vol=d["vol"])


@dataclass(frozen=True)
class RSLNParams:
    """
    Two-regime regime-switching lognormal parameters (monthly).

    Attributes
    ----------
    pswitch : tuple of float
        (p12, p21): probability of leaving regime 0, and of leaving regime 1
    means : tuple of float
        Monthly log-return mean per regime
    vols : tuple of float
        Monthly log-return volatility per regime (>= 0)

    Examples
    --------
    >>> params = RSLNParams(pswitch=(0.04, 0.2), means=(0.01, -0.02), vols=(0.035, 0.08))
    >>> params.stationary_probabilities()
    (0.8333..., 0.1666...)
    """

    pswitch: tuple[float, float]
    means: tuple[float, float]
    vols: tuple[float, float]

    def __post_init__(self) -> None:
        """Validate and normalize to tuples."""
        # Frozen dataclass workaround: use object.__setattr__
        object.__setattr__(self, "pswitch", _require_pair("pswitch", self.pswitch))
        object.__setattr__(self, "means", _require_pair("means", self.means))
        object.__setattr__(self, "vols", _require_pair("vols", self.vols))

        for i, p in enumerate(self.pswitch):
            _require_finite(f"pswitch[{i}]", p)
            if not 0.0 <= p <= 1.0:
                raise InvalidInput(f"CRITICAL: pswitch[{i}] must be in [0, 1], got {p}")
        for i, m in enumerate(self.means):
            _require_finite(f"means[{i}]", m)
        for i, s in enumerate(self.vols):
            _require_vol(f"vols[{i}]", s)

    def stationary_probabilities(self) -> tuple[float, float]:
        """
        Long-run probability of each regime.

        [T1] π₁ = p12 / (p12 + p21), π₀ = 1 - π₁

        Raises
        ------
        InvalidInput
            If both switching probabilities are zero (no unique stationary law)
        """
        p12, p21 = self.pswitch
        total = p12 + p21
        if total == 0:
            raise InvalidInput("CRITICAL: stationary law undefined when pswitch = (0, 0)")
        pi1 = p12 / total
        return 1.0 - pi1, pi1

    def to_dict(self) -> dict[str, list[float]]:
        """Convert to flat dictionary for serialization."""
        return {
            "pswitch": list(self.pswitch),
            "means": list(self.means),
            "vols": list(self.vols),
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "RSLNParams":
        """Create from flat dictionary."""
        return cls(pswitch=d["pswitch"], means=d["means"], vols=d["vols"])


ParameterSet = Vasicek1fParams | Vasicek2fParams | CIR1fParams | ILNParams | RSLNParams

#: Model family name -> parameter class
PARAMS_BY_MODEL: dict[str, type] = {
    "vasicek1f": Vasicek1fParams,
    "vasicek2f": Vasicek2fParams,
    "cir1f": CIR1fParams,
    "iln": ILNParams,
    "rsln": RSLNParams,
}


def params_from_dict(model: str, d: dict[str, Any]) -> ParameterSet:
    """
    Build the parameter set for a named model family.

    Raises
    ------
    InvalidInput
        If the model is unknown or a required field is missing
    """
    key = model.lower()
    if key not in PARAMS_BY_MODEL:
        available = ", ".join(sorted(PARAMS_BY_MODEL))
        raise InvalidInput(f"CRITICAL: unknown model '{model}'. Available: {available}")
    try:
        return PARAMS_BY_MODEL[key].from_dict(d)
    except KeyError as e:
        raise InvalidInput(f"CRITICAL: {key} parameters missing field {e}") from e


# =============================================================================
# Presets (CAS-SOA)
# =============================================================================

#: Default one-factor Vasicek inflation parameters
CAS_INFLATION_VAS1F = Vasicek1fParams(r0=0.01, a=0.4, b=0.048, v=0.04, rmin=-0.02)

#: Default two-factor Vasicek real interest rate parameters
CAS_RATES_VAS2F = Vasicek2fParams(
    short=Vasicek1fParams(r0=0.0, a=1.0, v=0.01, rmin=-0.05),
    long=Vasicek1fParams(r0=0.007, a=0.1, b=0.028, v=0.0165, rmin=None),
)

PRESETS: dict[str, tuple[str, ParameterSet]] = {
    "cas_inflation_vas1f": ("vasicek1f", CAS_INFLATION_VAS1F),
    "cas_rates_vas2f": ("vasicek2f", CAS_RATES_VAS2F),
}
