"""
Compiler for kit templates

Expands @import/@include, @import-partial and $variable directives found
in HTML comments, recursively, into a single output text.
"""

import os
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..config import appsettings, AppSettings
from ..models.compile import CompileContext, CompileResult, Directive
from .directives import DirectiveRegistry
from .errors import (
    DirectiveSyntaxError,
    KitError,
    KitIOError,
    MissingFileError,
    TokenizeError,
)
from .log import LOG, kitfile_context
from .resolver import PathResolver
from .scanner import COMMENT_OPEN, DirectiveScanner
from .tokenizer import lineBreaks_count, tokens_split

PathLike = Union[str, Path]


class KitCompiler:
    """
    Compiles kit templates to plain text (usually HTML)

    Responsibilities:
    - Walk each file's tokens, copying plain text through verbatim
    - Dispatch directives to the DirectiveRegistry handlers
    - Recurse into imported templates with a shared CompileContext
    - Turn the first KitError of a compile tree into a failed CompileResult
    - Write output only when the whole tree compiled
    """

    def __init__(
        self,
        searchFolders: Optional[Iterable[PathLike]] = None,
        postsDir: Optional[PathLike] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        """
        Initialize compiler

        Args:
            searchFolders: Fallback directories for imports, tried in order.
                           Defaults to settings.search_folders
            postsDir: Directory holding @import-partial targets. Defaults to
                      settings.posts_dir under the working directory
            settings: Application settings (default: appsettings singleton)
        """
        self.settings = settings or appsettings

        if searchFolders is None:
            searchFolders = self.settings.search_folders
        self.searchFolders: List[Path] = [Path(folder) for folder in searchFolders]

        if postsDir is None:
            postsDir = Path.cwd() / self.settings.posts_dir
        self.postsDir = Path(postsDir)

        self.resolver = PathResolver(self.searchFolders)
        self.directives = DirectiveRegistry()

    def compile(
        self, filePath: PathLike, outputPath: Optional[PathLike] = None
    ) -> CompileResult:
        """
        Compile a kit file and optionally write the result

        Args:
            filePath: Entry template
            outputPath: Where to write the compiled text; nothing is written
                        if compilation fails

        Returns:
            CompileResult with compiledCode on success, or the first error
        """
        path = Path(os.path.abspath(filePath))
        LOG(f"Compiling {path}", level=2)

        context = CompileContext()
        try:
            compiledCode = self.file_compile(path, context)
        except KitError as e:
            return self.result_fail(e)

        return self.result_finish(compiledCode, outputPath)

    def compile_string(
        self,
        source: str,
        filePath: PathLike,
        outputPath: Optional[PathLike] = None,
    ) -> CompileResult:
        """
        Compile in-memory kit source

        Args:
            source: Kit source text
            filePath: Nominal location of the source; imports resolve relative
                      to its directory and it takes part in cycle detection
            outputPath: Where to write the compiled text, as for compile()

        Returns:
            CompileResult with compiledCode on success, or the first error
        """
        path = Path(os.path.abspath(filePath))
        LOG(f"Compiling source as {path}", level=2)

        context = CompileContext()
        try:
            with context.ancestor_guard(path), kitfile_context(path):
                compiledCode = self.source_expand(source, path, context)
        except KitError as e:
            return self.result_fail(e)

        return self.result_finish(compiledCode, outputPath)

    def result_fail(self, error: KitError) -> CompileResult:
        """Build the failed result for the first error of a compile tree"""
        LOG(f"Compilation failed: {error}", level=2)
        return CompileResult(successful=False, message=str(error), error=error)

    def result_finish(
        self, compiledCode: str, outputPath: Optional[PathLike]
    ) -> CompileResult:
        """Write successful output if requested and build the result"""
        written: Optional[Path] = None
        if outputPath is not None:
            written = Path(outputPath)
            try:
                self.text_write(written, compiledCode)
            except KitIOError as e:
                return self.result_fail(e)
            LOG(f"Wrote {written}", level=2)

        return CompileResult(
            successful=True,
            message="Compiled successfully.",
            compiledCode=compiledCode,
            outputPath=written,
        )

    def file_compile(self, filePath: Path, context: CompileContext) -> str:
        """
        Expand one template file (one recursive step)

        Args:
            filePath: Absolute path of the template
            context: Shared state of the current top-level compile

        Returns:
            Expanded text of the file

        Raises:
            CycleError: If filePath is already being expanded
            KitError: Any fault in this file or its imports, unchanged
        """
        with context.ancestor_guard(filePath), kitfile_context(filePath):
            source = self.text_read(filePath)
            return self.source_expand(source, filePath, context)

    def source_expand(
        self, source: str, filePath: Path, context: CompileContext
    ) -> str:
        """
        Walk the tokens of one file and expand its directives

        Text outside directives, including ordinary comments and all
        whitespace, is copied unchanged.

        Args:
            source: Text of the file
            filePath: Absolute path of the file (for imports and errors)
            context: Shared state of the current top-level compile

        Returns:
            Expanded text
        """
        tokens = tokens_split(source)
        scanner = DirectiveScanner(tokens, filePath.name)
        LOG(f"{len(tokens)} tokens", level=3)

        output: List[str] = []
        line = 1
        index = 0
        # Unprocessed tail of tokens[index] after a directive closed mid-token
        pending: Optional[str] = None

        while index < len(tokens):
            token = tokens[index] if pending is None else pending
            pending = None
            commentStart = token.find(COMMENT_OPEN)

            if commentStart == -1:
                output.append(token)
                line += lineBreaks_count(token)
                index += 1
                continue

            # Text before '<!--' never holds a line break
            output.append(token[:commentStart])
            opening = token[commentStart:]

            if not scanner.candidate_is(index, opening):
                output.append(opening)
                line += lineBreaks_count(opening)
                index += 1
                continue

            directive = scanner.directive_read(index, opening, line)
            output.append(self.directive_expand(directive, filePath, context))

            consumed = directive.source
            if COMMENT_OPEN in directive.suffix:
                # Another comment shares the closing token; scan it next
                pending = directive.suffix
                consumed = consumed[:-len(pending)]
                index += directive.tokenCount - 1
            else:
                output.append(directive.suffix)
                index += directive.tokenCount

            line += lineBreaks_count(consumed)

        return ''.join(output)

    def directive_expand(
        self, directive: Directive, filePath: Path, context: CompileContext
    ) -> str:
        """
        Dispatch a directive to its handler

        Returns:
            Text replacing the directive in the output (may be empty)

        Raises:
            DirectiveSyntaxError: If the keyword needs a value and has none
        """
        spec = self.directives.spec_get(directive.keyword)
        LOG(f"line {directive.line}: {directive.keyword}", level=3)

        if spec.requires_predicate and directive.predicate is None:
            raise DirectiveSyntaxError(
                f"Missing a value after {directive.keyword} in this kit "
                f"comment: {directive.source.strip()}",
                fileName=filePath.name,
                line=directive.line,
            )

        return spec.handler(directive, self, filePath, context)

    def text_read(
        self, path: Path, fileName: Optional[str] = None, line: Optional[int] = None
    ) -> str:
        """
        Read a file's full contents as text, line endings untouched

        Args:
            path: File to read
            fileName: File to blame in errors (default: the file itself)
            line: Line of the directive that asked for the read, if any

        Raises:
            MissingFileError: The file does not exist
            TokenizeError: The file is not valid text in settings.encoding
            KitIOError: Any other read failure
        """
        fileName = fileName or path.name
        encoding = self.settings.encoding
        try:
            with open(path, 'r', encoding=encoding, newline='') as f:
                return f.read()
        except FileNotFoundError:
            raise MissingFileError(f"Cannot find file {path}", fileName=fileName, line=line)
        except UnicodeDecodeError:
            raise TokenizeError(
                f"Failed to tokenize {path.name}. (Is the file {encoding} "
                "encoded? Ensure it is not malformed.)",
                fileName=fileName,
                line=line,
            )
        except OSError as e:
            raise KitIOError(
                f"Cannot read file {path}: {e.strerror or e}",
                fileName=fileName,
                line=line,
            )

    def text_write(self, path: Path, text: str) -> None:
        """
        Write compiled text, creating parent directories

        Raises:
            KitIOError: The destination cannot be written
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding=self.settings.encoding, newline='') as f:
                f.write(text)
        except OSError as e:
            raise KitIOError(
                f"Cannot write file {path}: {e.strerror or e}",
                fileName=path.name,
            )
