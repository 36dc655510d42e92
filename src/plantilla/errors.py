"""Exception classes for Plantilla.

Structural template problems raise TemplateSyntaxError. Runtime limits raise
RenderError. Missing partials and missing variables are never errors.
"""

from __future__ import annotations


class PlantillaError(Exception):
    """Base exception for all Plantilla errors."""

    pass


class TemplateSyntaxError(PlantillaError):
    """Structural error in a template.

    Raised for an unterminated tag, an unterminated ``{{#each}}`` or
    ``{{#if}}`` block, or a close tag with no matching open block. The
    render of the affected template is aborted; no partial output is
    returned.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize syntax error with optional location.

        Args:
            message: Error description
            lineno: Line number where the construct starts (1-indexed)
            col_offset: Column offset where the construct starts (1-indexed)
            source_file: Template name or path (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class RenderError(PlantillaError):
    """Error during rendering that is not a syntax problem.

    Raised when partial inclusion recurses deeper than the configured limit.
    """

    pass


class BuildError(PlantillaError):
    """Error that stops a whole site build (e.g. missing data file)."""

    pass
