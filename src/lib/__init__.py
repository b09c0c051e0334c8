"""
kitbuild - Kit template compiler

Assembles HTML pages from fragments by expanding @import and $variable
directives embedded in HTML comments.
"""

__version__ = "1.0.0"

from .compiler import KitCompiler
from .site import SiteBuilder
from .directives import DirectiveRegistry
from .log import LOG, state_connectToLogger

__all__ = ["KitCompiler", "SiteBuilder", "DirectiveRegistry", "LOG", "state_connectToLogger", "__version__"]
