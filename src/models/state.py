"""
Program state model and pipeline helper

ProgramState is the record handed from stage to stage by kitbuild's CLI;
pipeline() threads one through a sequence of stages.
"""

import dataclasses
from argparse import Namespace
from dataclasses import dataclass, field
from functools import reduce
from pathlib import Path
from typing import TYPE_CHECKING, Callable, List, Optional, Type, TypeVar

if TYPE_CHECKING:
    from .compile import CompileResult
    from .site import SiteReport


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    State carried through the kitbuild pipeline.

    Each stage returns a copy with its own fields filled in:
        - Initial: inputdir, outputdir, verbosity, inputFile, site,
                   searchFolder, postsDir
        - env_check: inputSourceFile, outputFile, searchFolders, postsPath, envOK
        - kit_compile: compileResult (single file) or siteReport (--site)
        - results_report: nothing, terminal stage

    Attributes:
        inputdir: Directory containing kit sources (the site root for --site)
        outputdir: Directory for compiled files
        verbosity: Logging verbosity level (1-3)
        inputFile: Kit file to compile, relative to inputdir
        site: Build the whole blog site instead of a single file
        searchFolder: Fallback import directories as given on the CLI
        postsDir: Directory for @import-partial targets as given on the CLI
        envOK: Environment validation passed
        inputSourceFile: Resolved path of the input kit file
        outputFile: Where the compiled page is written
        searchFolders: Fallback import directories in effect
        postsPath: Directory for @import-partial targets in effect
        compileResult: Outcome of a single-file compile
        siteReport: Outcome of a site build
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    site: bool = field(default=False)
    searchFolder: Optional[List[str]] = field(default=None)
    postsDir: Optional[str] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    outputFile: Path = field(default=Path("/"))
    searchFolders: List[Path] = field(default_factory=list)
    postsPath: Path = field(default=Path("/"))
    compileResult: Optional["CompileResult"] = field(default=None)
    siteReport: Optional["SiteReport"] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type[PS], options: Namespace, inputdir: Path, outputdir: Path
    ) -> PS:
        """
        Build the initial state from parsed CLI options.

        Options that are not ProgramState fields (chris_plugin adds a few of
        its own) are ignored.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        values = {k: v for k, v in vars(options).items() if k in known}
        values.update(inputdir=inputdir, outputdir=outputdir)
        return cls(**values)

    def copy(self: PS) -> PS:
        """Shallow copy, so a stage never mutates its input"""
        return dataclasses.replace(self)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Run `stages` left to right, each on the previous stage's result.

    Example:
        pipeline(state, env_check, kit_compile, results_report)
        # same as results_report(kit_compile(env_check(state)))
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
