"""Classpath-style lookup of bundled and operator-supplied resources."""

from __future__ import annotations

from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ddworkflow.core.config import AppSettings, get_settings

BUNDLED_RESOURCE_PACKAGE = "ddworkflow.resources"


class Classpath:
    """Ordered resource roots searched for classpath-relative names.

    Operator-supplied directories are searched first, then the resources
    bundled with the package.
    """

    def __init__(
        self,
        roots: Sequence[Traversable | Path | str] = (),
        *,
        include_bundled: bool = True,
    ) -> None:
        self._roots: List[Traversable] = [Path(root) if isinstance(root, str) else root for root in roots]
        if include_bundled:
            self._roots.append(resources.files(BUNDLED_RESOURCE_PACKAGE))

    @property
    def roots(self) -> List[Traversable]:
        return list(self._roots)

    def find(self, name: str) -> Optional[Traversable]:
        """Return the first resource matching ``name`` or ``None``."""

        parts = [part for part in name.replace("\\", "/").split("/") if part not in ("", ".")]
        if not parts:
            return None
        for root in self._roots:
            candidate = root
            for part in parts:
                candidate = candidate / part
            if candidate.is_file():
                return candidate
        return None

    def describe(self) -> str:
        return ", ".join(str(root) for root in self._roots)


def classpath_from_settings(
    settings: AppSettings | None = None,
    extra_roots: Iterable[Path | str] = (),
) -> Classpath:
    settings = settings or get_settings()
    return Classpath([*extra_roots, *settings.classpath])
