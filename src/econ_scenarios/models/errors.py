"""
Error taxonomy shared by calibration and simulation.

All errors are raised synchronously, before any output is produced.
"""


class InvalidInput(ValueError):
    """
    Raised for malformed or degenerate inputs.

    Covers calibration data (too few points, non-numeric values, zero
    division in a reparameterization) and simulation parameters
    (negative volatility, out-of-range probabilities, non-positive
    trial or step counts).
    """

    pass
