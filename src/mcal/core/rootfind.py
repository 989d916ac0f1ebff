# src/mcal/core/rootfind.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable


@dataclass(frozen=True)
class RootResult:
    t: datetime
    iterations: int


def bisect_datetime(
    f: Callable[[datetime], float],
    a: datetime,
    b: datetime,
    tol_seconds: float = 1.0,
    max_iter: int = 100,
) -> RootResult:
    """
    Root-finding on a datetime bracket [a, b] where f(a) * f(b) <= 0.

    Secant (false position) steps are only taken on odd iterations; every
    other step is a plain bisection, so the bracket always shrinks and the
    classic one-sided stall of regula falsi cannot happen.
    """
    if tol_seconds <= 0:
        raise ValueError("tol_seconds must be positive")
    if a > b:
        a, b = b, a

    fa = f(a)
    fb = f(b)

    if not (math.isfinite(fa) and math.isfinite(fb)):
        raise ValueError("Non-finite function value at bracket endpoints.")
    if fa == 0.0:
        return RootResult(a, 0)
    if fb == 0.0:
        return RootResult(b, 0)
    if fa * fb > 0.0:
        raise ValueError("Root is not bracketed (same sign).")

    a0 = a

    def dt(sec: float) -> datetime:
        return a0 + timedelta(seconds=sec)

    xa = 0.0
    xb = (b - a).total_seconds()

    for it in range(1, max_iter + 1):
        if (xb - xa) <= tol_seconds:
            return RootResult(dt(0.5 * (xa + xb)), it)

        xc = 0.5 * (xa + xb)
        if it % 2 == 1 and fb != fa:
            xs = xb - fb * (xb - xa) / (fb - fa)
            if xa < xs < xb and math.isfinite(xs):
                xc = xs

        fc = f(dt(xc))
        if not math.isfinite(fc):
            raise ValueError("Non-finite function value during root finding.")
        if fc == 0.0:
            return RootResult(dt(xc), it)

        if fa * fc < 0.0:
            xb, fb = xc, fc
        else:
            xa, fa = xc, fc

    return RootResult(dt(0.5 * (xa + xb)), max_iter)
