"""
Shared fixtures for kitbuild tests
"""

import pytest

from kitbuild.lib.compiler import KitCompiler


@pytest.fixture
def write(tmp_path):
    """
    Write a file under tmp_path, creating parent directories

    Content is written byte-for-byte (no newline translation) and the
    absolute path is returned.
    """
    def _write(relative: str, content):
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode('utf-8')
        path.write_bytes(content)
        return path

    return _write


@pytest.fixture
def compiler(tmp_path):
    """Compiler with no search folders and partials under tmp_path/posts"""
    return KitCompiler(searchFolders=[], postsDir=tmp_path / "posts")
