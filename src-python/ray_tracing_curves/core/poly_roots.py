"""
Copyright 2026 ray-tracing-curves authors and contributors

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

"""
Real roots of low-order polynomials restricted to the unit interval.

Coefficients are given highest degree first:
    [a, b]        ->                 a*t + b = 0
    [a, b, c]     ->         a*t^2 + b*t + c = 0
    [a, b, c, d]  -> a*t^3 + b*t^2 + c*t + d = 0

The method finds the critical points in [0, 1] (the roots of the derivative,
by the same function one degree lower), splits the interval at them, and
bisects every sub-interval whose end values change sign. Each such
sub-interval is monotone and so contains exactly one root.
"""

from typing import List, Sequence

from .constants import ROOT_BISECTION_TOLERANCE


def evaluate_poly(coeffs: Sequence[float], x: float) -> float:
    """
    Evaluate a polynomial by direct summation of its terms.

    Args:
        coeffs: Coefficients, highest degree first.
        x: Evaluation point.

    Returns:
        The value of the polynomial at x.
    """
    y = 0.0
    xk = 1.0
    for c in reversed(coeffs):
        y += c * xk
        xk *= x
    return y


def derivative_coeffs(coeffs: Sequence[float]) -> List[float]:
    """Coefficients of the derivative, highest degree first."""
    degree = len(coeffs) - 1
    return [(degree - i) * c for i, c in enumerate(coeffs[:-1])]


def find_poly_roots(coeffs: Sequence[float]) -> List[float]:
    """
    Find the real roots of a polynomial of degree 1 to 3 lying in [0, 1].

    Args:
        coeffs: 1 to 4 coefficients, highest degree first. The leading
            coefficient must be nonzero. A single (constant) coefficient has
            no roots.

    Returns:
        Sorted list of distinct roots in [0, 1]. Empty if there are none.

    Raises:
        ValueError: If the leading coefficient is zero, or if more than four
            coefficients are given.
    """
    coeffs = [float(c) for c in coeffs]
    order = len(coeffs)
    if order == 0 or order > 4:
        raise ValueError(f"Expected 1 to 4 polynomial coefficients, got {order}")
    if coeffs[0] == 0:
        raise ValueError(f"Leading polynomial coefficient must be nonzero: {coeffs}")

    if order == 1:
        return []
    if order == 2:
        x = -coeffs[1] / coeffs[0]
        return [x] if 0.0 <= x <= 1.0 else []

    # Critical points split [0, 1] into monotone pieces
    crits = sorted(set([0.0, 1.0] + find_poly_roots(derivative_coeffs(coeffs))))
    crit_vals = [evaluate_poly(coeffs, x) for x in crits]

    # No sign change anywhere in [0, 1]
    if max(crit_vals) * min(crit_vals) > 0:
        return []

    roots: List[float] = []
    for i in range(len(crits) - 1):
        if crit_vals[i] * crit_vals[i + 1] <= 0:
            x = _find_monotone_root(coeffs, crits[i], crits[i + 1])
            # A root sitting on a shared critical point is found from both sides
            if not roots or x != roots[-1]:
                roots.append(x)
    return roots


def _find_monotone_root(coeffs: Sequence[float], a: float, b: float) -> float:
    """
    Bisect for the unique root of a polynomial on [a, b].

    The caller guarantees that the polynomial is monotone on [a, b] and that
    its end values do not share a sign.
    """
    lo, mid, hi = a, 0.5 * (a + b), b
    width = 0.5 * (b - a)
    while width > ROOT_BISECTION_TOLERANCE:
        y_lo = evaluate_poly(coeffs, lo)
        y_mid = evaluate_poly(coeffs, mid)
        y_hi = evaluate_poly(coeffs, hi)

        if y_lo == 0:
            return lo
        if y_hi == 0:
            return hi
        if y_lo * y_mid <= 0:
            lo, mid, hi = lo, 0.5 * (lo + mid), mid
        else:
            lo, mid, hi = mid, 0.5 * (mid + hi), hi
        width *= 0.5
    return mid


# Example usage and testing
if __name__ == "__main__":
    # (t - 0.2)(t - 0.5)(t - 0.9)
    cubic = [1.0, -1.6, 0.73, -0.09]
    print(f"Roots of {cubic}: {find_poly_roots(cubic)}")
    print(f"Roots of t^2 + 1: {find_poly_roots([1.0, 0.0, 1.0])}")
    print(f"Roots of 2t - 1: {find_poly_roots([2.0, -1.0])}")
