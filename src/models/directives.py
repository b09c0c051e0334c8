"""
Directive specification and metadata models

Defines the structure and categories of kit directives for dispatch,
validation and registry management.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List, Set


class DirectiveCategory(Enum):
    """
    Categories of kit directives

    Used for organization and dispatch.
    """
    IMPORT = "import"        # @import, @include
    PARTIAL = "partial"      # @import-partial
    VARIABLE = "variable"    # $name, $name value


@dataclass
class DirectiveSpec:
    """
    Specification for a kit directive keyword

    Attributes:
        name: Keyword including its sigil (e.g., "@import")
        category: Category for organization
        description: Human-readable description
        handler: Expansion function (directive, compiler, filePath, context) -> str
        requires_predicate: Whether the keyword must be followed by a value
        examples: Example usage strings
        aliases: Alternative keywords for the directive
    """
    name: str
    category: DirectiveCategory
    description: str
    handler: Callable
    requires_predicate: bool = False
    examples: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)


# Keywords with built-in meaning; anything else is a variable name
RESERVED_KEYWORDS: Set[str] = {
    '@import',
    '@include',
    '@import-partial',
}


def reserved_is(keyword: str) -> bool:
    """Check if a keyword is reserved"""
    return keyword.lower() in RESERVED_KEYWORDS
