"""Standard normal PDF/CDF built on the Abramowitz-Stegun erf approximation"""

import math

SQRT_2 = math.sqrt(2.0)
INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)

# A&S formula 7.1.26, max absolute error ~1.5e-7
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911


def sq(x: float) -> float:
    return x * x


def pdf(x: float) -> float:
    """Probability density of the standard normal distribution"""
    return INV_SQRT_2PI * math.exp(-0.5 * x * x)


def erf(x: float) -> float:
    """Error function approximation (A&S 7.1.26).

    Rating updates depend on this exact polynomial, not on math.erf.
    """
    sign = 1.0 if x >= 0 else -1.0
    x = abs(x)

    t = 1.0 / (1.0 + _P * x)
    y = 1.0 - (((((_A5 * t + _A4) * t) + _A3) * t + _A2) * t + _A1) * t * math.exp(-x * x)

    return sign * y


def cdf(x: float) -> float:
    """Cumulative distribution of the standard normal distribution"""
    return 0.5 * (1.0 + erf(x / SQRT_2))
