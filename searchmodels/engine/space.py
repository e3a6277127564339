"""
Solution spaces and operator dispatch.

A search runs over a single ``SolutionSpace`` or over an ordered list of
spaces producing configurations of different kinds. In the list case every
operator call is routed to the first space accepting the configuration.

Configurations must be hashable and define value equality, since the search
deduplicates them over the whole run.
"""

import logging
import random
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Sequence, Union

from searchmodels.engine.errors import IncompatibilityError

logger = logging.getLogger(__name__)


class SolutionSpace(ABC):
    """Abstract base class for configuration spaces."""

    @property
    @abstractmethod
    def element_type(self) -> Union[type, tuple]:
        """Type (or tuple of types) of the configurations this space yields."""

    @abstractmethod
    def sample(self) -> Any:
        """Create a random configuration sampling this space."""

    @abstractmethod
    def config_type(self, config: Any) -> Any:
        """
        Identify the kind of a configuration.

        Only configurations sharing a config type are combined together,
        e.g. polynomials of the same degree.
        """

    @abstractmethod
    def mutate(self, config: Any, iteration: int) -> Any:
        """
        Perturb a configuration.

        Args:
            config: Configuration to mutate
            iteration: Current search iteration, available for annealing

        Returns:
            A new configuration
        """

    @abstractmethod
    def combine(self, a: Any, b: Any) -> Any:
        """Combine two compatible configurations into a new one."""

    def accepts(self, config: Any) -> bool:
        return isinstance(config, self.element_type)


SpaceLike = Union[SolutionSpace, Sequence[SolutionSpace]]

_MISSING = object()


def _as_list(space: SpaceLike) -> List[SolutionSpace]:
    if isinstance(space, SolutionSpace):
        return [space]
    return list(space)


def sample_config(space: SpaceLike, rng: random.Random = None) -> Any:
    """
    Sample a fresh configuration.

    For a list of spaces the sampled space is chosen uniformly at random.
    """
    if isinstance(space, SolutionSpace):
        return space.sample()

    rng = rng or random
    return rng.choice(_as_list(space)).sample()


def compatible_space(space: SpaceLike, config: Any) -> SolutionSpace:
    """
    Select the space responsible for ``config``.

    Raises:
        IncompatibilityError: If no space in the list accepts ``config``
    """
    if isinstance(space, SolutionSpace):
        return space

    for s in space:
        if s.accepts(config):
            return s

    raise IncompatibilityError(
        f"incompatible space for {type(config).__name__} in space list "
        f"{[type(s).__name__ for s in space]}"
    )


def config_type(space: SpaceLike, config: Any) -> Any:
    """Config type of ``config`` as declared by its compatible space."""
    return compatible_space(space, config).config_type(config)


def compatible_config(
    config: Any,
    pool: Iterable[Any],
    space: SpaceLike,
    default: Any = _MISSING,
) -> Any:
    """
    Find the first configuration in ``pool`` sharing the type of ``config``.

    Args:
        config: Reference configuration
        pool: Configurations, or scored entries exposing ``.config``
        space: Space or list of spaces used to resolve config types
        default: Returned when nothing matches, instead of raising

    Raises:
        IncompatibilityError: If nothing in ``pool`` matches and no
            default is given
    """
    wanted = config_type(space, config)

    for item in pool:
        candidate = getattr(item, "config", item)
        if config_type(space, candidate) == wanted:
            return candidate

    if default is not _MISSING:
        return default

    raise IncompatibilityError(f"incompatible configuration for {config!r}")


def mutate(space: SpaceLike, config: Any, iteration: int) -> Any:
    """Mutate ``config`` with its compatible space."""
    return compatible_space(space, config).mutate(config, iteration)


def combine_select(space: SpaceLike, anchor: Any, pool: Sequence[Any]) -> Any:
    """
    Combine ``anchor`` with a compatible partner from ``pool``.

    ``pool`` is the shuffled elite slice with the anchor entry at its end;
    the partner is the first other entry of the same config type. Without
    a partner the anchor is returned unchanged, which the observed set
    later discards as a duplicate.
    """
    partner = compatible_config(anchor, pool[:-1], space, default=_MISSING)
    if partner is _MISSING:
        logger.debug(f"No crossover partner for {anchor!r}")
        return anchor

    return compatible_space(space, anchor).combine(anchor, partner)
