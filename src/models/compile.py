"""
Compiler-specific data models

Type-safe structures passed between the scanner, the directive handlers
and the recursive compiler.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..lib.errors import KitError


@dataclass(frozen=True)
class Directive:
    """
    A classified kit comment, reconstructed from one or more tokens

    Returned by DirectiveScanner.directive_read() for every comment whose
    body starts with a $/@ keyword. Lives only while the directive is
    being dispatched.

    Attributes:
        keyword: Keyword including its sigil (e.g., "@import", "$title")
        predicate: Trimmed text after the keyword, or None when absent
        source: Raw source text consumed, from "<!--" through the suffix
        tokenCount: Number of tokens consumed while reconstructing
        line: 1-based line where the comment opens
        suffix: Literal text after "-->" to re-emit after processing

    Example:
        For tokens ["<!--$title ", "Hello-->\\n"]:
        Directive(
            keyword="$title",
            predicate="Hello",
            source="<!--$title Hello-->\\n",
            tokenCount=2,
            line=1,
            suffix=""
        )
    """
    keyword: str
    predicate: Optional[str]
    source: str
    tokenCount: int
    line: int = 1
    suffix: str = ""

    def assignment_is(self) -> bool:
        """True when a variable directive carries a value to store"""
        return self.predicate is not None


@dataclass
class CompileContext:
    """
    State shared by every recursive step of one top-level compile

    A fresh context is created for each call to KitCompiler.compile() and
    handed by reference down the import tree, so assignments made inside an
    imported file stay visible to directives processed after it returns.

    Attributes:
        variables: Variable name (with sigil) -> current value
        ancestry: Absolute paths currently being expanded, outermost first
    """
    variables: Dict[str, str] = field(default_factory=dict)
    ancestry: List[Path] = field(default_factory=list)

    def ancestor_has(self, path: Path) -> bool:
        """Case-insensitive membership test on the ancestry stack"""
        key = str(path).lower()
        return any(str(ancestor).lower() == key for ancestor in self.ancestry)

    @contextmanager
    def ancestor_guard(self, path: Path) -> Iterator[None]:
        """
        Hold `path` on the ancestry stack for the duration of a block

        Raises:
            CycleError: If `path` is already being expanded further up
        """
        from ..lib.errors import CycleError

        if self.ancestor_has(path):
            raise CycleError(
                "Infinite import loop detected (e.g. file A imports file B, "
                "which imports file A). This must be fixed before the file "
                "can be compiled.",
                fileName=path.name,
            )
        self.ancestry.append(path)
        try:
            yield
        finally:
            self.ancestry.pop()


@dataclass
class CompileResult:
    """
    Outcome of one top-level compile

    Attributes:
        successful: Whether the whole tree compiled
        message: Human-readable status or error text
        compiledCode: Fully expanded text, None on failure
        outputPath: Destination written to, when one was requested
        error: The first error raised, None on success
    """
    successful: bool
    message: str
    compiledCode: Optional[str] = None
    outputPath: Optional[Path] = None
    error: Optional["KitError"] = None
