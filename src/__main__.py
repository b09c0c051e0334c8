#!/usr/bin/env python3
"""
kitbuild - Kit template compiler

Assembles HTML pages from shared fragments (headers, footers, navigation)
and per-page variables by expanding directives written inside ordinary
HTML comments.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Directives:
    <!--$title My Page-->              assign a variable
    <!--$title-->                      substitute a variable
    <!-- @import header, footer -->    expand other kit files (or include
                                       any other file verbatim)
    <!-- @import-partial $postFile --> include a raw file from the posts dir

Usage:
    kitbuild inputdir/ outputdir/ --inputFile page.kit
    kitbuild siteroot/ build/ --site

Examples:
    # Compile one page to output/page.html
    kitbuild . output/ --inputFile page.kit

    # With fallback folders for shared partials
    kitbuild . output/ --inputFile page.kit --searchFolder shared/ --searchFolder vendor/kit/

    # Build the blog (posts/ + templates/) into build/, verbosely
    kitbuild . build/ --site -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import KitCompiler, SiteBuilder, __version__, LOG, state_connectToLogger
from .lib.errors import SiteError
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
   _    _ _   _           _ _     _
  | | _(_) |_| |__  _   _(_) | __| |
  | |/ / | __| '_ \| | | | | |/ _` |
  |   <| | |_| |_) | |_| | | | (_| |
  |_|\_\_|\__|_.__/ \__,_|_|_|\__,_|

  Kit template compiler
"""

# Define CLI arguments
parser = ArgumentParser(
    description="kitbuild - Kit template compiler for HTML fragments",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", default="", type=str, help="Input kit file (relative to inputdir)"
)

parser.add_argument(
    "--site",
    action="store_true",
    help="Build the blog in inputdir (posts/ + templates/) into outputdir, which is emptied first",
)

parser.add_argument(
    "--searchFolder",
    action="append",
    default=None,
    type=str,
    help="Fallback folder for imports (repeatable, tried in order). Defaults to KITBUILD_SEARCH_FOLDERS",
)

parser.add_argument(
    "--postsDir",
    default=None,
    type=str,
    help="Directory for @import-partial targets. Defaults to inputdir/posts",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the kit input file
            - outputFile: Path the compiled page will be written to
            - searchFolders: Fallback import folders in effect
            - postsPath: Directory for @import-partial targets
            - envOK: True if environment is valid

    Exits:
        1 if neither --inputFile nor --site is given, or the input is missing
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if not state.inputFile and not state.site:
        print("Error: Specify --inputFile or --site", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    if state.inputFile:
        input_file = state.inputdir / state.inputFile
        if not input_file.is_file():
            print(f"Error: Input file not found: {input_file}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        state.inputSourceFile = input_file
        state.outputFile = state.outputdir / (input_file.stem + appsettings.output_extension)
        LOG(f"Input file: {input_file}", level=2)

    if state.searchFolder is not None:
        state.searchFolders = [Path(folder) for folder in state.searchFolder]
    else:
        state.searchFolders = [Path(folder) for folder in appsettings.search_folders]
    LOG(f"Search folders: {[str(folder) for folder in state.searchFolders]}", level=2)

    if state.postsDir:
        state.postsPath = Path(state.postsDir)
    else:
        state.postsPath = state.inputdir / appsettings.posts_dir
    LOG(f"Posts directory: {state.postsPath}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def kit_compile(inputstate: ProgramState) -> ProgramState:
    """
    Compile the input file, or build the whole site.

    Args:
        inputstate: Program state with resolved paths

    Returns:
        ProgramState with added field:
            - compileResult: CompileResult of a single-file compile, or
            - siteReport: SiteReport of a site build

    Exits:
        1 if the single-file compile fails or the site layout is unusable
    """

    state = inputstate.copy()

    compiler = KitCompiler(searchFolders=state.searchFolders, postsDir=state.postsPath)

    if state.site:
        LOG("Building site...", level=1)
        try:
            state.siteReport = SiteBuilder(
                rootDir=state.inputdir, outputDir=state.outputdir, compiler=compiler
            ).build()
        except SiteError as e:
            print(f"Site error: {e}", file=sys.stderr)
            sys.exit(1)
        return state

    LOG(f"Compiling {state.inputSourceFile.name}...", level=1)
    state.compileResult = compiler.compile(state.inputSourceFile, state.outputFile)
    if not state.compileResult.successful:
        print(f"Compile error: {state.compileResult.message}", file=sys.stderr)
        sys.exit(1)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display compilation results to user.

    Args:
        inputstate: Program state with compileResult or siteReport populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if any site page failed to compile
    """
    state: ProgramState = inputstate.copy()

    if state.siteReport is not None:
        report = state.siteReport
        LOG("\n✓ Site built" if report.successful else "\n✗ Site built with errors", level=1)
        LOG(f"  Posts: {len(report.posts)}", level=1)
        LOG(f"  Pages: {len(report.pages)}", level=1)
        for name, message in report.failures.items():
            print(f"Error generating {name}: {message}", file=sys.stderr)
        if not report.successful:
            sys.exit(1)
        return state

    LOG("\n✓ Compilation successful!", level=1)
    LOG(f"  Output: {state.compileResult.outputPath}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="kitbuild - Kit template compiler",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - compile kit templates to HTML.

    Orchestrates the full compilation pipeline:
        1. env_check: Validate paths and environment
        2. kit_compile: Compile one file, or build the site
        3. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing kit sources
        outputdir: Directory where compiled pages will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    # Execute compilation pipeline
    pipeline(state, env_check, kit_compile, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
