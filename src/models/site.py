"""
Site build data models
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List


@dataclass
class PostEntry:
    """
    One post discovered in the posts directory

    Attributes:
        slug: File stem, used as the output folder name
        title: Text of the post's first <h1>, or the slug
        file: File name inside the posts directory
        date: Modification time, used for newest-first ordering
    """
    slug: str
    title: str
    file: str
    date: datetime


@dataclass
class SiteReport:
    """
    Outcome of a site build

    Attributes:
        posts: Posts found, newest first
        pages: Output files written
        failures: Page name -> error message for pages that did not compile
    """
    posts: List[PostEntry] = field(default_factory=list)
    pages: List[Path] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def successful(self) -> bool:
        return not self.failures
