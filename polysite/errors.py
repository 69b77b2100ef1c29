from __future__ import annotations


class PolysiteError(Exception):
    """Base class for fatal build failures."""


class CatalogError(PolysiteError):
    pass


class TemplateCompileError(PolysiteError):
    pass


class BuildError(PolysiteError):
    pass
