"""
Compiler tests - failures

Tests that every fault becomes a failed CompileResult carrying the right
error type, file name and line number, that import cycles terminate, and
that nothing is written when compilation fails.
"""

import pytest

from kitbuild.lib.compiler import KitCompiler
from kitbuild.lib.errors import (
    CycleError,
    DirectiveSyntaxError,
    KitError,
    MissingFileError,
    TokenizeError,
    UndefinedVariableError,
)
from kitbuild.models.compile import CompileContext


class TestCycles:
    """Import cycles must be detected, never recursed into forever"""

    def test_self_import(self, write, compiler):
        """A file importing itself fails"""
        page = write("page.kit", "<!-- @import page -->")
        result = compiler.compile(page)

        assert not result.successful
        assert result.compiledCode is None
        assert isinstance(result.error, CycleError)
        assert "page.kit" in result.message

    def test_chain(self, write, compiler):
        """a -> b -> c -> a fails"""
        write("b.kit", "<!-- @import c -->")
        write("c.kit", "<!-- @import a -->")
        page = write("a.kit", "<!-- @import b -->")

        result = compiler.compile(page)

        assert isinstance(result.error, CycleError)
        assert result.error.fileName == "c.kit"
        assert "a.kit" in result.message

    def test_cycle_through_underscore_name(self, write, compiler):
        """The cycle is found whatever name the import was written with"""
        write("_loop.kit", "<!-- @import loop -->")
        page = write("page.kit", "<!-- @import _loop -->")

        assert isinstance(compiler.compile(page).error, CycleError)

    def test_long_chain_terminates(self, write, compiler):
        """Cycle detection does not depend on chain length"""
        for i in range(30):
            write(f"f{i}.kit", f"<!-- @import f{(i + 1) % 30} -->")

        assert isinstance(compiler.compile(write("start.kit", "<!-- @import f0 -->")).error, CycleError)

    def test_case_insensitive(self, write, compiler, tmp_path):
        """Paths on the ancestry stack compare case-insensitively"""
        context = CompileContext()
        with context.ancestor_guard(tmp_path / "Page.kit"):
            assert context.ancestor_has(tmp_path / "page.KIT")
            with pytest.raises(CycleError):
                with context.ancestor_guard(tmp_path / "PAGE.kit"):
                    pass

    def test_guard_pops_on_error(self, tmp_path):
        """Ancestry is unwound even when expansion fails"""
        context = CompileContext()
        with pytest.raises(KitError):
            with context.ancestor_guard(tmp_path / "a.kit"):
                with context.ancestor_guard(tmp_path / "b.kit"):
                    raise UndefinedVariableError("boom")

        assert context.ancestry == []


class TestMissingFiles:
    """Test unresolvable imports and partials"""

    def test_missing_import(self, write, compiler):
        """The error names the file that could not be found"""
        page = write("page.kit", "<p>\n<!-- @import missing.kit -->")
        result = compiler.compile(page)

        assert isinstance(result.error, MissingFileError)
        assert "missing.kit" in result.message
        assert result.error.line == 2
        assert result.error.fileName == "page.kit"

    def test_missing_import_without_extension(self, write, compiler):
        """The extension-defaulted name is reported"""
        page = write("page.kit", "<!-- @import missing -->")
        assert "missing.kit" in compiler.compile(page).message

    def test_missing_entry_file(self, compiler, tmp_path):
        """Compiling a file that does not exist fails cleanly"""
        result = compiler.compile(tmp_path / "nope.kit")

        assert not result.successful
        assert isinstance(result.error, MissingFileError)

    def test_missing_partial(self, write, compiler):
        """@import-partial of an absent posts file fails"""
        page = write("page.kit", "<!--$f gone.html--><!-- @import-partial $f -->")
        assert isinstance(compiler.compile(page).error, MissingFileError)

    def test_partial_variable_undefined(self, write, compiler):
        """@import-partial needs its variable assigned"""
        page = write("page.kit", "<!-- @import-partial $postFile -->")
        result = compiler.compile(page)

        assert isinstance(result.error, UndefinedVariableError)
        assert "$postFile" in result.message


class TestLocatedErrors:
    """Errors carry file name and 1-based line"""

    def test_undefined_variable_line(self, write, compiler):
        """Line counts plain text before the directive"""
        page = write("page.kit", "<html>\n<body>\n<p><!--$nope--></p>")
        result = compiler.compile(page)

        assert isinstance(result.error, UndefinedVariableError)
        assert result.error.line == 3
        assert result.message.startswith("Line 3 of page.kit:")
        assert "$nope" in result.message

    def test_line_counts_directive_text(self, write, compiler):
        """Line breaks inside earlier directives are counted"""
        page = write("page.kit", "<!--$a one\ntwo\n-->\n<!--$b-->")
        assert compiler.compile(page).error.line == 4

    def test_line_counts_ordinary_comments(self, write, compiler):
        """Line breaks inside ordinary comments are counted"""
        page = write("page.kit", "<!-- a\nnote -->\n<!--$b-->")
        assert compiler.compile(page).error.line == 3

    def test_crlf_lines(self, write, compiler):
        """CRLF counts as one line break"""
        page = write("page.kit", "a\r\nb\r\n<!--$b-->")
        assert compiler.compile(page).error.line == 3

    def test_error_in_import_names_imported_file(self, write, compiler):
        """The first error propagates unchanged from the file it happened in"""
        write("child.kit", "ok\n\n<!--$missing-->")
        page = write("page.kit", "<!-- @import child -->")
        result = compiler.compile(page)

        assert isinstance(result.error, UndefinedVariableError)
        assert result.error.fileName == "child.kit"
        assert result.error.line == 3

    def test_unterminated_directive(self, write, compiler):
        """A kit comment with no '-->' fails at its opening line"""
        page = write("page.kit", "<p>\n</p>\n<!--$title Never closed\n")
        result = compiler.compile(page)

        assert isinstance(result.error, DirectiveSyntaxError)
        assert result.error.line == 3

    def test_import_without_path(self, write, compiler):
        """@import needs at least one path"""
        page = write("page.kit", "<!-- @import -->")
        assert isinstance(compiler.compile(page).error, DirectiveSyntaxError)

    def test_empty_import_entry(self, write, compiler):
        """An empty entry in the import list is rejected"""
        write("a.kit", "A")
        page = write("page.kit", "<!-- @import a,,a -->")
        assert isinstance(compiler.compile(page).error, DirectiveSyntaxError)

    def test_undecodable_file(self, write, compiler):
        """Bytes that are not valid text fail to tokenize"""
        write("bad.kit", b"\xff\xfe\xfa invalid")
        page = write("page.kit", "<!-- @import bad -->")
        result = compiler.compile(page)

        assert isinstance(result.error, TokenizeError)
        assert "bad.kit" in result.message


class TestNoPartialOutput:
    """Failed compiles never write output"""

    def test_nothing_written_on_failure(self, write, compiler, tmp_path):
        """The destination is untouched"""
        page = write("page.kit", "<p>fine</p><!--$undefined-->")
        output = tmp_path / "out" / "page.html"

        result = compiler.compile(page, output)

        assert not result.successful
        assert result.outputPath is None
        assert not output.exists()

    def test_compiler_reusable_after_failure(self, write, compiler):
        """A failure leaves no ancestry or variables behind"""
        write("loop.kit", "<!-- @import loop -->")
        bad = write("bad.kit", "<!--$x 1--><!-- @import loop -->")
        good = write("good.kit", "<!-- @import other -->")
        write("other.kit", "fine")

        assert not compiler.compile(bad).successful
        assert compiler.compile(good).compiledCode == "fine"

    def test_compile_never_raises(self, write):
        """KitErrors are returned, not raised"""
        compiler = KitCompiler()
        page = write("page.kit", "<!--$nope-->")

        result = compiler.compile(page)

        assert isinstance(result.error, KitError)
