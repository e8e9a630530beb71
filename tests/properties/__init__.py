"""
Property-based testing using Hypothesis.

This package contains property tests that verify mathematical invariants
hold across randomly generated inputs.

Modules:
    test_short_rate_properties: Vasicek/CIR path invariants (convergence, floor, finiteness)
    test_equity_properties: ILN/RSLN output layout and regime invariants
    test_calibration_properties: estimator invariances
"""
