"""Import hook exposing a resolver to Python's ``import`` statement.

Example:
    resolver = MaskingResolver(SearchPathResolver(["vendor/lib.jar"]), ["secret"])
    with MaskingFinder(resolver):
        import visible_module
"""

from __future__ import annotations

import importlib.abc
import importlib.util
import logging
import sys
from types import ModuleType

from .sources import ModuleResolver
from .sources import ResolvedModule

logger = logging.getLogger(__name__)


class ResolvedModuleLoader(importlib.abc.Loader):
    """Executes a module produced by a resolver."""

    def __init__(self, resolved: ResolvedModule):
        self.resolved = resolved

    def create_module(self, spec):
        return None  # Default module creation

    def exec_module(self, module: ModuleType) -> None:
        code = self.resolved.code
        if code is None:
            code = compile(self.resolved.source, self.resolved.location, "exec")
        exec(code, module.__dict__)

    def get_source(self, fullname: str) -> str:
        return self.resolved.source.decode("utf-8")


class MaskingFinder(importlib.abc.MetaPathFinder):
    """Meta path finder backed by a ModuleResolver.

    Modules the resolver does not return (masked or absent) are left to
    the remaining finders on ``sys.meta_path``.
    """

    def __init__(self, resolver: ModuleResolver):
        self.resolver = resolver

    def find_spec(self, fullname, path=None, target=None):
        resolved = self.resolver.resolve_module(fullname, finalize=True)
        if resolved is None:
            return None

        logger.debug(f"[import] {fullname} -> {resolved.location}")
        spec = importlib.util.spec_from_loader(
            fullname,
            ResolvedModuleLoader(resolved),
            origin=resolved.location,
            is_package=resolved.is_package,
        )
        if spec is not None:
            spec.has_location = True
        return spec

    def install(self) -> None:
        """Put this finder first on ``sys.meta_path``."""
        if self not in sys.meta_path:
            sys.meta_path.insert(0, self)

    def uninstall(self) -> None:
        if self in sys.meta_path:
            sys.meta_path.remove(self)

    def __enter__(self) -> MaskingFinder:
        self.install()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.uninstall()

    def __repr__(self) -> str:
        return f"MaskingFinder({self.resolver!r})"


__all__ = ["MaskingFinder", "ResolvedModuleLoader"]
