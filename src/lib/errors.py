"""
Error taxonomy for the kit compiler

Every fault inside a compile tree is raised as a KitError subclass at the
point it happens and propagates unchanged through all enclosing imports.
KitCompiler.compile() turns the first one into a failed CompileResult.
"""

from typing import Optional


class KitError(Exception):
    """
    Base class for compile failures

    Attributes:
        message: Bare description of the fault
        fileName: Name of the file being expanded when the fault happened
        line: 1-based source line, None when no line applies
    """

    def __init__(
        self,
        message: str,
        fileName: str = "",
        line: Optional[int] = None,
    ) -> None:
        self.message = message
        self.fileName = fileName
        self.line = line
        super().__init__(self.text_render())

    def text_render(self) -> str:
        """Render as 'Line N of FILE: message'"""
        if self.line is not None and self.fileName:
            return f"Line {self.line} of {self.fileName}: {self.message}"
        if self.fileName:
            return f"{self.fileName}: {self.message}"
        return self.message


class TokenizeError(KitError):
    """Raised when a file cannot be decoded into text"""
    pass


class DirectiveSyntaxError(KitError):
    """Raised for unterminated kit comments and comments with no keyword"""
    pass


class CycleError(KitError):
    """Raised when a file is imported while it is still being expanded"""
    pass


class UndefinedVariableError(KitError):
    """Raised when a variable is used before any assignment"""
    pass


class MissingFileError(KitError):
    """Raised when an import or partial target cannot be found"""
    pass


class KitIOError(KitError):
    """Raised when reading or writing fails for reasons other than absence"""
    pass


class SiteError(Exception):
    """Raised when the site layout is unusable (e.g. no templates directory)"""
    pass
