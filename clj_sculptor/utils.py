from typing import TypedDict, TypeVar

T = TypeVar("T", bound=TypedDict("T", {}))
U = TypeVar("U", bound=TypedDict("U", {}))


def resolve_config(config: T, default_config: U) -> U:
    _config = default_config.copy()
    if config:
        for key in _config:
            if key in config:
                _config[key] = config[key]
    return _config


def end_column(column: int, text: str) -> int:
    """Column just past the last character of ``text`` when it starts at ``column``.

    Text spanning several lines ends on a physical line of its own, so only the
    width of that last line counts.
    """
    if "\n" in text:
        return len(text.rsplit("\n", 1)[1])
    return column + len(text)
