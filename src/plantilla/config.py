"""ContextVar-based render configuration for Plantilla.

Render settings are read from a ContextVar (PEP 567) instead of being
threaded through every call. Each thread has independent storage, so builds
that render pages in parallel need no locks.

Usage:
    from plantilla.config import RenderConfig, render_config_context

    with render_config_context(RenderConfig(json_indent=2)):
        html = render("{{json data}}", {"data": {"a": 1}})

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable render configuration.

    Attributes:
        json_indent: Indent used by ``{{json path}}``
        line_break: Marker that inline markdown substitutes for ``\\n``
        max_partial_depth: Maximum nesting of ``{{> name}}`` inclusions
        warn_missing_partials: Log a warning when a partial is not registered

    """

    json_indent: int = 6
    line_break: str = "<br>"
    max_partial_depth: int = 32
    warn_missing_partials: bool = True

    @classmethod
    def from_dict(cls, config_dict: dict) -> RenderConfig:
        """Create RenderConfig from a dictionary, ignoring unknown keys.

        Example:
            >>> RenderConfig.from_dict({"json_indent": 2, "theme": "x"}).json_indent
            2

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


@dataclass(frozen=True, slots=True)
class BuildConfig:
    """Where a site build reads its inputs and writes its pages.

    Relative directories are resolved against ``root``.

    Attributes:
        root: Site root directory
        templates_dir: Page templates (``*.html``)
        partials_dir: Partial templates (``*.html``)
        data_file: JSON file with ``site``, ``languages`` and ``pages``
        workers: Render pages on this many threads (1 = sequential)
        dry_run: Render every page but write nothing

    """

    root: Path = Path(".")
    templates_dir: Path = Path("templates")
    partials_dir: Path = Path("templates/partials")
    data_file: Path = Path("data.json")
    workers: int = 1
    dry_run: bool = False

    def resolve(self, path: Path) -> Path:
        """Resolve a configured path against the site root."""
        return path if path.is_absolute() else self.root / path


_DEFAULT_CONFIG: RenderConfig = RenderConfig()

_render_config: ContextVar[RenderConfig] = ContextVar(
    "render_config",
    default=_DEFAULT_CONFIG,
)


def get_render_config() -> RenderConfig:
    """Get the render configuration active in this thread/context."""
    return _render_config.get()


def set_render_config(config: RenderConfig) -> None:
    """Set render configuration for the current context.

    Only affects the current thread's context.
    """
    _render_config.set(config)


def reset_render_config() -> None:
    """Reset to the module-level default configuration."""
    _render_config.set(_DEFAULT_CONFIG)


@contextmanager
def render_config_context(config: RenderConfig) -> Iterator[None]:
    """Temporarily activate a render configuration.

    Restores the previous configuration even if an exception is raised.

    Example:
        >>> with render_config_context(RenderConfig(line_break="<br />")):
        ...     render_inline("a\\nb")
        'a<br />b'

    """
    previous = _render_config.get()
    _render_config.set(config)
    try:
        yield
    finally:
        _render_config.set(previous)


__all__ = [
    "BuildConfig",
    "RenderConfig",
    "get_render_config",
    "set_render_config",
    "reset_render_config",
    "render_config_context",
]
