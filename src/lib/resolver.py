"""
Import path resolution

Turns an import target into an existing file, honouring the partial
naming convention (a leading underscore may be written or omitted) and
an ordered list of fallback search folders.

Resolution order for '/site/pages/footer.kit' with search folder '/shared':
    1. /site/pages/footer.kit
    2. /site/pages/_footer.kit
    3. /shared/footer.kit
    4. /shared/_footer.kit
"""

import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from .log import LOG


def filename_toggleUnderscore(name: str) -> str:
    """
    Add a leading underscore, or strip it if already present

    Example:
        >>> filename_toggleUnderscore("footer.kit")
        '_footer.kit'
        >>> filename_toggleUnderscore("_footer.kit")
        'footer.kit'
    """
    if name.startswith('_'):
        return name[1:]
    return '_' + name


class PathResolver:
    """
    Resolves import targets against the importing directory and search folders
    """

    def __init__(self, searchFolders: Optional[Iterable[Union[str, Path]]] = None):
        """
        Args:
            searchFolders: Extra directories tried, in order, after the
                           importing file's own directory
        """
        self.searchFolders: List[Path] = [
            Path(os.path.abspath(folder)) for folder in (searchFolders or [])
        ]

    def candidates_generate(self, target: Path) -> Iterator[Path]:
        """Yield every location tried for `target`, in resolution order"""
        name = target.name
        alternate = filename_toggleUnderscore(name)

        yield target
        yield target.with_name(alternate)
        for folder in self.searchFolders:
            yield folder / name
            yield folder / alternate

    def path_resolve(self, target: Path) -> Optional[Path]:
        """
        Find the first existing regular file for an import target

        Args:
            target: Absolute path the import names, extension already applied

        Returns:
            Path of the file found, or None when every option is exhausted
        """
        for candidate in self.candidates_generate(target):
            if candidate.is_file():
                if candidate != target:
                    LOG(f"Resolved {target.name} -> {candidate}", level=3)
                return candidate
        return None
