"""Static site build: data + templates + partials -> HTML pages.

The data file holds three sections::

    {
      "site": {"url": "https://example.com", ...},
      "languages": {"en": {"prefix": "", "name": "English", ...}, ...},
      "pages": [
        {"template": "app-page", "lang": "en", "path": "mood",
         "slug": "mood", "outputPath": "mood/index.html", "data": {...}}
      ]
    }

Each page renders against a context merged from the site, its language and
its own ``data`` (page data wins). A page that fails is reported and the
remaining pages still build.

Thread Safety:
Templates, partials and site data are read-only after loading, so pages can
render on worker threads (BuildConfig.workers > 1).

"""

from __future__ import annotations

import json
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from contextvars import copy_context
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from plantilla.config import BuildConfig
from plantilla.context import merge_context
from plantilla.errors import BuildError, PlantillaError
from plantilla.partials import PartialRegistry, PartialRegistryBuilder
from plantilla.renderer import RenderWarning, TemplateRenderer
from plantilla.utils.logger import get_logger

logger = get_logger(__name__)


# =============================================================================
# Loading
# =============================================================================


def load_templates(directory: Path, suffix: str = ".html") -> dict[str, str]:
    """Read every template file in directory, keyed by file stem."""
    if not directory.is_dir():
        raise BuildError(f"Templates directory not found: {directory}")
    return {
        path.stem: path.read_text(encoding="utf-8")
        for path in sorted(directory.iterdir())
        if path.is_file() and path.suffix == suffix
    }


def load_partials(directory: Path, suffix: str = ".html") -> PartialRegistry:
    """Read every partial file in directory; a missing directory is empty."""
    return PartialRegistryBuilder().load_directory(directory, suffix).build()


def load_site_data(path: Path) -> dict[str, Any]:
    """Load the site data file."""
    if not path.is_file():
        raise BuildError(f"Data file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise BuildError(f"Data file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise BuildError(f"Data file {path} must contain a JSON object")
    if not isinstance(data.get("pages") or [], list):
        raise BuildError(f"Data file {path}: \"pages\" must be a list")
    return data


# =============================================================================
# Context building
# =============================================================================


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    """Return value as a mapping; None counts as empty."""
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise BuildError(f"{what} must be an object, got {type(value).__name__}")
    return value


def build_context(
    site: Mapping[str, Any],
    languages: Mapping[str, Mapping[str, Any]],
    page: Mapping[str, Any],
) -> dict[str, Any]:
    """Build the render context for one page.

    Merges site globals, the page language and derived URLs, then the
    page's own ``data`` on top.

    Raises:
        BuildError: The page names a language that is not configured, or a
            record that must be an object is not one
    """
    site = _require_mapping(site, "site")
    languages = _require_mapping(languages, "languages")
    page = _require_mapping(page, "page")
    page_data = _require_mapping(page.get("data"), "page data")

    code = page.get("lang")
    if not isinstance(code, str) or code not in languages:
        raise BuildError(f"Unknown language {code!r}")
    lang = _require_mapping(languages[code], f"language {code!r}")
    prefix = lang.get("prefix") or ""
    page_path = page.get("path") or ""
    site_url = site.get("url") or ""
    default_code = next(iter(languages))

    lang_switcher = []
    for other_code, other in languages.items():
        other = _require_mapping(other, f"language {other_code!r}")
        other_prefix = other.get("prefix") or ""
        if page_path == "":
            url = "/" if other_code == default_code else f"{other_prefix}/"
        else:
            url = f"{other_prefix}/{page_path}/"
        lang_switcher.append(
            {
                "code": other_code,
                "name": other.get("name"),
                "flag": other.get("flag"),
                "url": url,
                "fullUrl": f"{site_url}{url}",
                "isCurrent": other_code == code,
            }
        )

    apps = _require_mapping(lang.get("nav"), f"language {code!r} nav").get("apps") or []
    if not isinstance(apps, (list, tuple)):
        raise BuildError(f"language {code!r} nav.apps must be a list")
    nav_apps = []
    for app in apps:
        app = _require_mapping(app, f"language {code!r} nav app")
        nav_apps.append(
            {**app, "url": f"{prefix}/{app.get('slug')}/", "isCurrent": app.get("slug") == page.get("slug")}
        )

    path_suffix = f"{page_path}/" if page_path else ""

    derived = {
        "site": site,
        "lang": lang,
        "langPrefix": prefix,
        "currency": lang.get("currency"),
        "langSwitcher": lang_switcher,
        "navApps": nav_apps,
        "brandUrl": f"{prefix}/" if prefix else "/",
        "footerHomeUrl": f"{prefix}/{path_suffix}",
        "canonicalUrl": f"{site_url}{prefix}/{path_suffix}",
        "xDefaultUrl": f"{site_url}/{path_suffix}",
        "footer": lang.get("footer"),
        "cookie": lang.get("cookie"),
        "privacyUrl": f"{prefix}/privacy/",
    }
    return merge_context(derived, page_data)


# =============================================================================
# Build
# =============================================================================


@dataclass(frozen=True, slots=True)
class PageFailure:
    """A page that could not be built."""

    output_path: str
    message: str


@dataclass(slots=True)
class BuildReport:
    """Outcome of a site build, in page order."""

    built: list[str] = field(default_factory=list)
    failed: list[PageFailure] = field(default_factory=list)
    warnings: list[tuple[str, RenderWarning]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass(frozen=True, slots=True)
class PageResult:
    """Rendered output or error message for one page."""

    output_path: str
    html: str | None
    error: str | None
    warnings: tuple[RenderWarning, ...] = ()


class SiteBuilder:
    """Build every page listed in the site data.

    Usage:
        >>> report = SiteBuilder(BuildConfig(root=Path("site"))).build()
        >>> report.ok
        True

    """

    __slots__ = ("_config", "_data", "_templates", "_partials")

    def __init__(self, config: BuildConfig) -> None:
        self._config = config
        self._data: dict[str, Any] = {}
        self._templates: dict[str, str] = {}
        self._partials = PartialRegistry()

    def load(self) -> None:
        """Load data, templates and partials (once per build)."""
        config = self._config
        self._data = load_site_data(config.resolve(config.data_file))
        self._templates = load_templates(config.resolve(config.templates_dir))
        self._partials = load_partials(config.resolve(config.partials_dir))
        logger.info("Templates: %s", ", ".join(self._templates) or "(none)")
        logger.info("Partials:  %s", ", ".join(self._partials) or "(none)")
        logger.info("Pages:     %d", len(self.pages))

    @property
    def pages(self) -> list[Mapping[str, Any]]:
        return list(self._data.get("pages") or [])

    def build(self) -> BuildReport:
        """Render and write all pages.

        Raises:
            BuildError: Data file or templates directory is missing
        """
        self.load()
        pages = self.pages

        if self._config.workers > 1:
            with ThreadPoolExecutor(max_workers=self._config.workers) as ex:
                # Each task runs in a copy of the caller's context so the
                # active RenderConfig reaches the worker threads.
                futures = [ex.submit(copy_context().run, self.render_page, page) for page in pages]
                results = [future.result() for future in futures]
        else:
            results = [self.render_page(page) for page in pages]

        report = BuildReport()
        for result in results:
            report.warnings.extend((result.output_path, w) for w in result.warnings)
            if result.error is not None:
                logger.error("  ✗ %s — %s", result.output_path, result.error)
                report.failed.append(PageFailure(result.output_path, result.error))
                continue
            try:
                self._write(result.output_path, result.html or "")
            except OSError as e:
                logger.error("  ✗ %s — %s", result.output_path, e)
                report.failed.append(PageFailure(result.output_path, str(e)))
                continue
            logger.info("  ✓ %s", result.output_path)
            report.built.append(result.output_path)

        logger.info(
            "Done! Built %d pages.%s",
            len(report.built),
            f" {len(report.failed)} error(s)." if report.failed else "",
        )
        return report

    def render_page(self, page: Mapping[str, Any]) -> PageResult:
        """Render one page; failures are captured, not raised."""
        if not isinstance(page, Mapping):
            return PageResult("", None, f"page must be an object, got {type(page).__name__}")
        output_path = str(page.get("outputPath") or "")
        if not output_path:
            return PageResult(output_path, None, "page has no outputPath")
        template_name = page.get("template")
        template = self._templates.get(template_name) if isinstance(template_name, str) else None
        if template is None:
            return PageResult(output_path, None, f'template "{template_name}" not found')

        renderer = TemplateRenderer(self._partials)
        try:
            context = build_context(
                self._data.get("site") or {},
                self._data.get("languages") or {},
                page,
            )
            html = renderer.render(template, context, source_file=f"{template_name}.html")
        except PlantillaError as e:
            return PageResult(output_path, None, str(e))
        return PageResult(output_path, html, None, tuple(renderer.get_warnings()))

    def _write(self, output_path: str, html: str) -> None:
        if self._config.dry_run:
            return
        target = self._config.root / output_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(html, encoding="utf-8")


def build_site(config: BuildConfig) -> BuildReport:
    """Build a site in one call."""
    return SiteBuilder(config).build()


__all__ = [
    "BuildReport",
    "PageFailure",
    "PageResult",
    "SiteBuilder",
    "build_context",
    "build_site",
    "load_partials",
    "load_site_data",
    "load_templates",
]
