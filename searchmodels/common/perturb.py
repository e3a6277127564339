"""
Random perturbation helpers for writing ``mutate`` operators.

Each helper leaves its input untouched with probability ``1 - p1`` and
otherwise perturbs it, clamping the result to optional bounds.
"""

import math
import random
from typing import Any, Optional, Sequence, TypeVar

T = TypeVar("T")


def _clamp(x, lower, upper):
    if lower is not None:
        x = max(lower, x)
    if upper is not None:
        x = min(upper, x)
    return x


def scale(
    x,
    s: float = 1.1,
    p1: float = 0.5,
    p2: float = 0.5,
    lower=None,
    upper=None,
    rng: Optional[random.Random] = None,
):
    """
    Scale ``x`` by ``s`` with probability ``p1``.

    When ``x`` is scaled it grows (``x * s``) with probability ``p2`` and
    shrinks (``x / s``) otherwise. Integers are rounded up and stay integers.

    Args:
        x: Value to perturb
        s: Scale factor
        p1: Probability of modifying ``x``
        p2: Probability of growing, given that ``x`` is modified
        lower: Optional minimum value
        upper: Optional maximum value
        rng: Random generator (defaults to the ``random`` module)

    Returns:
        The perturbed value
    """
    rng = rng or random
    if rng.random() >= p1:
        return x

    y = x * s if rng.random() < p2 else x / s
    y = _clamp(y, lower, upper)
    if isinstance(x, int) and not isinstance(x, bool):
        return math.ceil(y)
    return y


def translate(
    x,
    s=2,
    p1: float = 0.5,
    p2: float = 0.5,
    lower=None,
    upper=None,
    rng: Optional[random.Random] = None,
):
    """
    Shift ``x`` by ``s`` with probability ``p1``.

    When ``x`` is shifted it returns ``x + s`` with probability ``p2`` and
    ``x - s`` otherwise.
    """
    rng = rng or random
    if rng.random() >= p1:
        return x

    y = x + s if rng.random() < p2 else x - s
    return _clamp(y, lower, upper)


def change(
    x: T,
    choices: Sequence[Any],
    p1: float = 0.5,
    rng: Optional[random.Random] = None,
):
    """
    Replace ``x`` by a random element of ``choices`` with probability ``p1``.

    If ``x`` is itself one of the choices the effective change probability
    is lower than ``p1``.
    """
    rng = rng or random
    return rng.choice(choices) if rng.random() < p1 else x
