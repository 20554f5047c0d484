"""Name -> input class registry used by the hosts to build inputs from config."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from .errors import ConfigError

T = TypeVar("T")

_INPUTS: dict[str, type] = {}


def register_input(name: str) -> Callable[[type[T]], type[T]]:
    def decorator(cls: type[T]) -> type[T]:
        existing = _INPUTS.get(name)
        if existing is not None and existing is not cls:
            raise ValueError(f"input type '{name}' already registered to {existing.__name__}")
        _INPUTS[name] = cls
        return cls

    return decorator


def registered_inputs() -> list[str]:
    return sorted(_INPUTS)


def create_input(name: str, **kwargs: Any) -> Any:
    try:
        cls = _INPUTS[name]
    except KeyError:
        raise ConfigError(
            f"unknown input type '{name}' (known: {', '.join(registered_inputs())})"
        ) from None
    return cls(**kwargs)
