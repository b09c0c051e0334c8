"""
Compiler tests - imports, includes and partials

Tests @import/@include resolution (relative paths, extension defaulting,
underscore partials, search folders), raw includes of non-template files,
@import-partial and output writing.
"""

from kitbuild.lib.compiler import KitCompiler


class TestImport:
    """Test @import of template files"""

    def test_import_with_extension(self, write, compiler):
        """An explicit .kit extension is used as written"""
        write("header.kit", "<header>H</header>")
        page = write("page.kit", "<!-- @import header.kit --><main/>")

        assert compiler.compile(page).compiledCode == "<header>H</header><main/>"

    def test_import_without_extension(self, write, compiler):
        """A bare name gets the template extension"""
        write("header.kit", "<header>H</header>")
        page = write("page.kit", "<!--@import header-->")

        assert compiler.compile(page).compiledCode == "<header>H</header>"

    def test_quoted_paths(self, write, compiler):
        """Quotes around paths are stripped"""
        write("a.kit", "A")
        write("b.kit", "B")
        page = write("page.kit", "<!-- @import \"a.kit\", 'b' -->")

        assert compiler.compile(page).compiledCode == "AB"

    def test_list_order(self, write, compiler):
        """Comma-separated imports expand in the order written"""
        write("one.kit", "1")
        write("two.kit", "2")
        write("three.kit", "3")
        page = write("page.kit", "<!-- @import three, one, two -->")

        assert compiler.compile(page).compiledCode == "312"

    def test_include_alias(self, write, compiler):
        """@include behaves like @import"""
        write("footer.kit", "<footer/>")
        page = write("page.kit", "<!-- @include footer -->")

        assert compiler.compile(page).compiledCode == "<footer/>"

    def test_keyword_case_insensitive(self, write, compiler):
        """Reserved keywords ignore case"""
        write("footer.kit", "<footer/>")
        page = write("page.kit", "<!-- @IMPORT footer -->")

        assert compiler.compile(page).compiledCode == "<footer/>"

    def test_nested_imports(self, write, compiler):
        """Imported templates expand their own imports"""
        write("inner.kit", "[inner]")
        write("middle.kit", "(<!-- @import inner -->)")
        page = write("page.kit", "{<!-- @import middle -->}")

        assert compiler.compile(page).compiledCode == "{([inner])}"

    def test_relative_to_importing_file(self, write, compiler):
        """Each file resolves imports against its own directory"""
        write("partials/nav.kit", "<nav><!-- @import links --></nav>")
        write("partials/links.kit", "<a/>")
        page = write("pages/page.kit", "<!-- @import ../partials/nav -->")

        assert compiler.compile(page).compiledCode == "<nav><a/></nav>"

    def test_sibling_imports_of_same_file(self, write, compiler):
        """Importing the same file twice in a row is not a cycle"""
        write("hr.kit", "<hr>")
        page = write("page.kit", "<!-- @import hr --><p>x</p><!-- @import hr -->")

        assert compiler.compile(page).compiledCode == "<hr><p>x</p><hr>"


class TestPartialResolution:
    """Test the underscore partial convention and search folders"""

    def test_underscore_added(self, write, compiler):
        """footer resolves to _footer.kit"""
        write("_footer.kit", "<footer/>")
        page = write("page.kit", "<!-- @import footer.kit -->")

        result = compiler.compile(page)

        assert result.successful
        assert result.compiledCode == "<footer/>"

    def test_underscore_stripped(self, write, compiler):
        """_footer resolves to footer.kit"""
        write("footer.kit", "<footer/>")
        page = write("page.kit", "<!-- @import _footer -->")

        assert compiler.compile(page).compiledCode == "<footer/>"

    def test_search_folder(self, write, tmp_path):
        """Imports missing beside the importer are looked up in search folders"""
        write("shared/nav.kit", "<nav/>")
        page = write("site/page.kit", "<!-- @import nav -->")
        compiler = KitCompiler(searchFolders=[tmp_path / "shared"])

        assert compiler.compile(page).compiledCode == "<nav/>"

    def test_search_folder_underscore(self, write, tmp_path):
        """Search folders honour the underscore convention too"""
        write("shared/_nav.kit", "<nav/>")
        page = write("site/page.kit", "<!-- @import nav -->")
        compiler = KitCompiler(searchFolders=[tmp_path / "shared"])

        assert compiler.compile(page).compiledCode == "<nav/>"

    def test_local_file_beats_search_folder(self, write, tmp_path):
        """The importing directory is tried first"""
        write("shared/nav.kit", "shared")
        write("site/nav.kit", "local")
        page = write("site/page.kit", "<!-- @import nav -->")
        compiler = KitCompiler(searchFolders=[tmp_path / "shared"])

        assert compiler.compile(page).compiledCode == "local"

    def test_search_folder_order(self, write, tmp_path):
        """Search folders are tried in the order given"""
        write("first/nav.kit", "first")
        write("second/nav.kit", "second")
        page = write("site/page.kit", "<!-- @import nav -->")
        compiler = KitCompiler(searchFolders=[tmp_path / "first", tmp_path / "second"])

        assert compiler.compile(page).compiledCode == "first"


class TestRawIncludes:
    """Non-template files are included without expansion"""

    def test_html_included_verbatim(self, write, compiler):
        """Directives inside non-kit files are left alone"""
        write("snippet.html", "<p><!--$undefined--></p>\r\n")
        page = write("page.kit", "<!-- @import snippet.html -->")

        result = compiler.compile(page)

        assert result.successful
        assert result.compiledCode == "<p><!--$undefined--></p>\r\n"

    def test_mixed_list(self, write, compiler):
        """Template and raw files can share one import list"""
        write("style.css", "body{}")
        write("head.kit", "<!--$t T--><title><!--$t--></title>")
        page = write("page.kit", "<!-- @import head, style.css -->")

        assert compiler.compile(page).compiledCode == "<title>T</title>body{}"


class TestImportPartial:
    """Test @import-partial from the posts directory"""

    def test_partial_from_variable(self, write, compiler):
        """The variable's value names a file in the posts directory"""
        write("posts/hello.kit", "<h1>Hello</h1><!--$notExpanded-->")
        page = write(
            "templates/post.kit",
            "<!--$postFile hello.kit--><article><!-- @import-partial $postFile --></article>",
        )

        result = compiler.compile(page)

        assert result.successful
        assert result.compiledCode == "<article><h1>Hello</h1><!--$notExpanded--></article>"


class TestOutput:
    """Test compile results and written output"""

    def test_success_message(self, write, compiler):
        """A successful result carries a status message"""
        page = write("page.kit", "x")
        result = compiler.compile(page)

        assert result.successful
        assert result.message == "Compiled successfully."
        assert result.error is None
        assert result.outputPath is None

    def test_output_written(self, write, compiler, tmp_path):
        """Output is written, creating directories"""
        page = write("page.kit", "<!--$x 1--><b><!--$x--></b>\n")
        output = tmp_path / "out" / "deep" / "page.html"

        result = compiler.compile(page, output)

        assert result.successful
        assert result.outputPath == output
        assert output.read_bytes() == b"<b>1</b>\n"

    def test_compile_string(self, write, compiler, tmp_path):
        """In-memory source resolves imports against its nominal path"""
        write("templates/page.kit", "<h1><!--$title--></h1>")
        result = compiler.compile_string(
            "<!--$title Home-->\n<!-- @import templates/page -->",
            tmp_path / "virtual.kit",
        )

        assert result.successful
        assert result.compiledCode == "<h1>Home</h1>"
