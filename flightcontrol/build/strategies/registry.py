"""Registry mapping each BuildSystemKind to its strategy class.

Registration order is detection order: the first strategy whose marker
file is present wins.
"""

from typing import Any

from flightcontrol.core.exceptions.errors import UnsupportedProjectError
from flightcontrol.models.build import BuildSystemKind
from flightcontrol.build.strategies.base import BuildStrategy

_REGISTRY: dict[BuildSystemKind, type[BuildStrategy]] = {}


def register_strategy(cls: type[BuildStrategy]) -> type[BuildStrategy]:
    """Class decorator adding a strategy to the registry."""
    _REGISTRY[cls.kind] = cls
    return cls


def registered_strategies() -> list[type[BuildStrategy]]:
    """Return the registered strategy classes in detection order."""
    return list(_REGISTRY.values())


def get_strategy(kind: BuildSystemKind, **kwargs: Any) -> BuildStrategy:
    """Instantiate the strategy registered for ``kind``.

    Raises:
        UnsupportedProjectError: If no strategy is registered for ``kind``.
    """
    try:
        strategy_cls = _REGISTRY[kind]
    except KeyError as e:
        raise UnsupportedProjectError(
            f"No build strategy registered for '{kind.value}'",
        ) from e
    return strategy_cls(**kwargs)
