"""
Directive implementations for kit templates

Each handler expands one classified directive into the text that replaces
it in the output. Uses DirectiveSpec for metadata and dispatch.

Handlers share the signature (directive, compiler, filePath, context) -> str
where filePath is the absolute path of the file being expanded and context
is the CompileContext of the current top-level compile.
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, List

from ..models.compile import CompileContext, Directive
from ..models.directives import DirectiveSpec, DirectiveCategory, reserved_is
from .errors import (
    CycleError,
    DirectiveSyntaxError,
    MissingFileError,
    UndefinedVariableError,
)
from .log import LOG


def importSpec_clean(entry: str) -> str:
    """
    Strip whitespace and surrounding quotes from one import list entry

    Example:
        >>> importSpec_clean(' "partials/header.kit" ')
        'partials/header.kit'
    """
    entry = re.sub(r'^\s*[\'"]', '', entry)
    entry = re.sub(r'[\'"]\s*$', '', entry)
    return entry.strip()


class DirectiveRegistry:
    """
    Registry of directive specifications and handlers

    Maps reserved keywords (@import, @include, @import-partial) to their
    specs. Every other keyword names a variable and falls through to the
    variable spec.
    """

    def __init__(self) -> None:
        """Initialize the directive registry and register all built-in directives"""
        self.specs: Dict[str, DirectiveSpec] = {}
        self.importDirectives_register()
        self.partialDirectives_register()
        self.variableDirectives_register()

    def register(self, spec: DirectiveSpec) -> None:
        """Register a directive specification"""
        self.specs[spec.name] = spec
        # Also register aliases
        for alias in spec.aliases:
            self.specs[alias] = spec

    def spec_get(self, keyword: str) -> DirectiveSpec:
        """
        Get the directive specification for a keyword

        Reserved keywords match case-insensitively; anything else is a
        variable.
        """
        if reserved_is(keyword):
            return self.specs[keyword.lower()]
        return self.variable

    def directives_listByCategory(self, category: DirectiveCategory) -> List[DirectiveSpec]:
        """Get all distinct directives in a category"""
        specs = list({id(spec): spec for spec in self.specs.values()}.values())
        specs.append(self.variable)
        return [spec for spec in specs if spec.category == category]

    def importDirectives_register(self) -> None:
        """Register @import and its @include alias"""

        def import_handler(
            directive: Directive, compiler: Any, filePath: Path, context: CompileContext
        ) -> str:
            """
            Handle @import a[, b, ...] - expand or include each file in order

            Targets are resolved relative to the importing file. Template
            files are compiled recursively with the shared context; any
            other file is included as-is.
            """
            parts = []
            for entry in directive.predicate.split(','):
                spec = importSpec_clean(entry)
                if not spec:
                    raise DirectiveSyntaxError(
                        f"Empty entry in import list: {directive.predicate}",
                        fileName=filePath.name,
                        line=directive.line,
                    )

                target = Path(os.path.abspath(filePath.parent / spec))
                target = compiler.settings.extension_apply(target)

                found = compiler.resolver.path_resolve(target)
                if found is None:
                    raise MissingFileError(
                        "You're attempting to import a file that does not exist "
                        f"in the specified location: {target.name} ({spec})",
                        fileName=filePath.name,
                        line=directive.line,
                    )

                if compiler.settings.templateFile_is(found):
                    if context.ancestor_has(found):
                        raise CycleError(
                            f"Infinite import loop detected: {found.name} is already "
                            "being compiled (e.g. file A imports file B, which "
                            "imports file A). This must be fixed before the file "
                            "can be compiled.",
                            fileName=filePath.name,
                            line=directive.line,
                        )
                    LOG(f"importing {found}", level=2)
                    parts.append(compiler.file_compile(found, context))
                else:
                    LOG(f"including {found}", level=2)
                    parts.append(compiler.text_read(found, filePath.name, directive.line))

            return ''.join(parts)

        self.register(DirectiveSpec(
            name='@import',
            category=DirectiveCategory.IMPORT,
            description='Expand template files, or include other files verbatim, in order',
            handler=import_handler,
            requires_predicate=True,
            examples=['<!-- @import header -->', '<!-- @import "_nav.kit", footer.html -->'],
            aliases=['@include'],
        ))

    def partialDirectives_register(self) -> None:
        """Register @import-partial"""

        def partial_handler(
            directive: Directive, compiler: Any, filePath: Path, context: CompileContext
        ) -> str:
            """
            Handle @import-partial $var - include a posts file named by a variable

            The target is read raw; its directives are not expanded.
            """
            name = directive.predicate
            if name not in context.variables:
                raise UndefinedVariableError(
                    f"The variable {name} is undefined.",
                    fileName=filePath.name,
                    line=directive.line,
                )

            target = compiler.postsDir / context.variables[name]
            if not target.is_file():
                raise MissingFileError(
                    f"Cannot find partial {target}",
                    fileName=filePath.name,
                    line=directive.line,
                )

            LOG(f"including partial {target}", level=2)
            return compiler.text_read(target, filePath.name, directive.line)

        self.register(DirectiveSpec(
            name='@import-partial',
            category=DirectiveCategory.PARTIAL,
            description='Include the raw contents of the posts file named by a variable',
            handler=partial_handler,
            requires_predicate=True,
            examples=['<!-- @import-partial $postFile -->'],
        ))

    def variableDirectives_register(self) -> None:
        """Register the catch-all variable directive"""

        def variable_handler(
            directive: Directive, compiler: Any, filePath: Path, context: CompileContext
        ) -> str:
            """Handle $name value (assign) and $name (use)"""
            if directive.assignment_is():
                context.variables[directive.keyword] = directive.predicate
                LOG(f"{directive.keyword} assigned", level=3)
                return ""

            if directive.keyword not in context.variables:
                raise UndefinedVariableError(
                    f"The variable {directive.keyword} is undefined.",
                    fileName=filePath.name,
                    line=directive.line,
                )
            return context.variables[directive.keyword]

        # Held outside self.specs: matches any non-reserved keyword
        self.variable = DirectiveSpec(
            name='$*',
            category=DirectiveCategory.VARIABLE,
            description='Assign a variable (with a value) or substitute it (without)',
            handler=variable_handler,
            examples=['<!--$title Home-->', '<!--$title-->'],
        )
