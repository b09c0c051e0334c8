"""
Models package for kitbuild

Contains data structures and type definitions for the compilation pipeline.
"""

from .state import ProgramState, pipeline
from .directives import DirectiveSpec, DirectiveCategory, RESERVED_KEYWORDS
from .compile import Directive, CompileContext, CompileResult
from .site import PostEntry, SiteReport

__all__ = [
    "ProgramState",
    "pipeline",
    "DirectiveSpec",
    "DirectiveCategory",
    "RESERVED_KEYWORDS",
    "Directive",
    "CompileContext",
    "CompileResult",
    "PostEntry",
    "SiteReport",
]
