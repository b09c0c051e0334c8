"""
Blog site builder

Turns a site root laid out as

    posts/        one .kit file per post (names starting with '_' are skipped)
    templates/    post.kit and index.kit

into a build directory of <slug>/index.html pages plus an index.html that
lists every post, newest first.

Each page is compiled from a small generated kit source that sets the
page variables and imports the matching template:

    <!--$postTitle Hello World-->
    <!--$postFile hello-world.kit-->
    <!-- @import templates/post.kit -->

Templates usually pull the post body in with <!-- @import-partial $postFile -->
and the list of posts with <!--$postList-->.
"""

import os
import re
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from ..config import appsettings, AppSettings
from ..models.site import PostEntry, SiteReport
from .compiler import KitCompiler
from .errors import KitError, SiteError
from .log import LOG

PathLike = Union[str, Path]

H1_PATTERN = re.compile(r'<h1[^>]*>(.*?)</h1>', re.IGNORECASE | re.DOTALL)


def title_extract(text: str, fallback: str) -> str:
    """
    Return the text of the first <h1> in `text`, or `fallback`

    Example:
        >>> title_extract('<h1 class="t">Hello\\n World</h1>', "hello")
        'Hello World'
    """
    match = H1_PATTERN.search(text)
    if match:
        title = ' '.join(match.group(1).split())
        if title:
            return title
    return fallback


class SiteBuilder:
    """
    Builds every post page and the index page of a site root

    Pages are compiled independently: a failing page is recorded in the
    report and the build moves on.
    """

    def __init__(
        self,
        rootDir: PathLike,
        outputDir: Optional[PathLike] = None,
        compiler: Optional[KitCompiler] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        """
        Args:
            rootDir: Site root holding posts/ and templates/
            outputDir: Build directory (default: <rootDir>/build). Emptied
                       before the build
            compiler: Compiler to use (default: one reading partials from
                      <rootDir>/posts)
            settings: Application settings (default: appsettings singleton)
        """
        self.settings = settings or appsettings
        self.rootDir = Path(os.path.abspath(rootDir))
        self.templatesDir = self.rootDir / self.settings.templates_dir
        self.postsDir = self.rootDir / self.settings.posts_dir

        if outputDir is None:
            outputDir = self.rootDir / self.settings.build_dir
        self.outputDir = Path(os.path.abspath(outputDir))

        self.compiler = compiler or KitCompiler(postsDir=self.postsDir, settings=self.settings)

    def build(self) -> SiteReport:
        """
        Build the whole site

        Returns:
            SiteReport listing posts, pages written and page failures

        Raises:
            SiteError: Templates directory missing, or an unsafe output dir
        """
        self.env_check()
        self.outputDir_prepare()

        report = SiteReport()
        report.posts = self.posts_collect(report)
        if not report.posts:
            LOG(f"No {self.settings.template_extension} post files found in {self.postsDir}", level=1)
            return report

        for post in report.posts:
            self.postPage_build(post, report)
        self.indexPage_build(report.posts, report)

        LOG(f"Site build complete: {len(report.pages)} pages, {len(report.failures)} failures", level=1)
        return report

    def env_check(self) -> None:
        """Validate the site layout before anything is touched"""
        if not self.templatesDir.is_dir():
            raise SiteError(
                f"Templates directory not found: {self.templatesDir}. Please create "
                "a templates directory with post.kit and index.kit templates."
            )
        protected = {
            "the site root": self.rootDir,
            "the posts directory": self.postsDir,
            "the templates directory": self.templatesDir,
            "the partials directory": Path(os.path.abspath(self.compiler.postsDir)),
        }
        for label, source in protected.items():
            if self.outputDir == source or self.outputDir in source.parents:
                raise SiteError(f"Refusing to empty {self.outputDir}: it contains {label}")

    def outputDir_prepare(self) -> None:
        """Create the output directory, or empty it if it exists"""
        if self.outputDir.is_dir():
            LOG(f"Cleaning build directory {self.outputDir}", level=2)
            for child in self.outputDir.iterdir():
                if child.is_dir() and not child.is_symlink():
                    shutil.rmtree(child)
                else:
                    child.unlink()
        else:
            self.outputDir.mkdir(parents=True)

    def posts_collect(self, report: SiteReport) -> List[PostEntry]:
        """
        Find post files and read their titles

        Unreadable posts are recorded as failures and left out.

        Returns:
            Posts sorted newest first (ties broken by slug)
        """
        if not self.postsDir.is_dir():
            return []

        posts = []
        for path in sorted(self.postsDir.iterdir()):
            if not path.is_file() or path.name.startswith('_'):
                continue
            if not self.settings.templateFile_is(path):
                continue

            slug = path.stem
            try:
                text = self.compiler.text_read(path)
            except KitError as e:
                report.failures[slug] = str(e)
                LOG(f"Skipping post {path.name}: {e}", level=1)
                continue

            posts.append(PostEntry(
                slug=slug,
                title=title_extract(text, slug),
                file=path.name,
                date=datetime.fromtimestamp(path.stat().st_mtime),
            ))

        posts.sort(key=lambda post: post.slug)
        posts.sort(key=lambda post: post.date, reverse=True)
        return posts

    def template_import(self, name: str) -> str:
        """Import directive for a template, relative to the site root"""
        return f"<!-- @import {self.settings.templates_dir}/{name} -->"

    def page_compile(
        self, name: str, source: str, nominalPath: Path, outputPath: Path, report: SiteReport
    ) -> None:
        """Compile one generated page source and record the outcome"""
        result = self.compiler.compile_string(source, nominalPath, outputPath)
        if result.successful:
            report.pages.append(outputPath)
            LOG(f"Generated {name}", level=1)
        else:
            report.failures[name] = result.message
            LOG(f"Error generating {name}: {result.message}", level=1)

    def postPage_build(self, post: PostEntry, report: SiteReport) -> None:
        """Compile <build>/<slug>/index.html for one post"""
        source = (
            f"<!--$postTitle {post.title}-->\n"
            f"<!--$postFile {post.file}-->\n"
            f"{self.template_import('post' + self.settings.template_extension)}"
        )
        self.page_compile(
            name=f"{post.slug}/",
            source=source,
            nominalPath=self.rootDir / f"{post.slug}{self.settings.template_extension}",
            outputPath=self.outputDir / post.slug / "index.html",
            report=report,
        )

    def indexPage_build(self, posts: List[PostEntry], report: SiteReport) -> None:
        """Compile <build>/index.html listing every post"""
        postList = ''.join(
            f'<h2><a href="{post.slug}/">{post.title}</a></h2>\n' for post in posts
        )
        source = (
            f"<!--$postList {postList}-->\n"
            f"{self.template_import('index' + self.settings.template_extension)}"
        )
        self.page_compile(
            name="index.html",
            source=source,
            nominalPath=self.rootDir / f"index{self.settings.template_extension}",
            outputPath=self.outputDir / "index.html",
            report=report,
        )
