"""Installed module table.

The host tells the uploader which modules are installed and where they
live on disk. Modules may ship mapping metadata under a conventional
sub-directory, and metadata paths of the form ``@ModuleName/...`` are
resolved against this table.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, Mapping, Optional, Union

METADATA_SUBDIRECTORY = Path("resources") / "config" / "uploader"


@dataclass(frozen=True)
class InstalledModule:
    """A module installed in the host application."""
    name: str
    path: Path
    namespace: str

    @property
    def metadata_directory(self) -> Path:
        """Where the module keeps its uploader metadata, if it has any."""
        return self.path / METADATA_SUBDIRECTORY


class ModuleTable(Mapping[str, InstalledModule]):
    """Read-only mapping of module name to installed module, in install order."""

    def __init__(self, modules: Iterable[InstalledModule] = ()):
        self._modules: Dict[str, InstalledModule] = {}
        for module in modules:
            self._modules[module.name] = module

    @classmethod
    def from_paths(
        cls,
        paths: Mapping[str, Union[str, Path]],
        namespaces: Optional[Mapping[str, str]] = None,
    ) -> "ModuleTable":
        """Build a table from ``name -> install location``.

        Args:
            paths: Module name -> directory
            namespaces: Optional module name -> namespace; defaults to the name
        """
        namespaces = namespaces or {}
        return cls(
            InstalledModule(name, Path(path), namespaces.get(name, name))
            for name, path in paths.items()
        )

    def __getitem__(self, name: str) -> InstalledModule:
        return self._modules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    def __repr__(self) -> str:
        return f"ModuleTable({list(self._modules)})"
