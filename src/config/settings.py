"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use KITBUILD_ prefix (e.g., KITBUILD_POSTS_DIR=articles).

Settings can also be loaded from a .env file in the project root.
"""

from pathlib import Path
from typing import List, Union

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use KITBUILD_ prefix.

    Examples:
        KITBUILD_TEMPLATE_EXTENSION=.kit
        KITBUILD_SEARCH_FOLDERS='["shared/partials", "/opt/kit/framework"]'
        KITBUILD_POSTS_DIR=articles
    """

    model_config = SettingsConfigDict(
        env_prefix="KITBUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Compiler configuration
    template_extension: str = Field(
        default=".kit",
        description="Extension of files whose directives are expanded on import",
    )

    encoding: str = Field(
        default="utf-8",
        description="Text encoding used to read sources and write output",
    )

    search_folders: List[str] = Field(
        default_factory=list,
        description="Fallback directories tried, in order, when an import is not found beside its importer",
    )

    posts_dir: str = Field(
        default="posts",
        description="Directory holding the files named by @import-partial (relative to the working directory)",
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug output during compilation",
    )

    # Site layout configuration
    templates_dir: str = Field(
        default="templates",
        description="Directory (under the site root) holding post.kit and index.kit",
    )

    build_dir: str = Field(
        default="build",
        description="Default output directory (under the site root) for site builds",
    )

    output_extension: str = Field(
        default=".html",
        description="Extension given to single-file compile output",
    )

    def templateFile_is(self, path: Union[str, Path]) -> bool:
        """
        Check whether a path names a template (directive-expanded) file.

        Args:
            path: File path to check

        Returns:
            True if the extension matches template_extension (case-insensitive)

        Example:
            >>> settings = AppSettings()
            >>> settings.templateFile_is("header.KIT")
            True
        """
        return Path(path).suffix.lower() == self.template_extension.lower()

    def extension_apply(self, path: Path) -> Path:
        """
        Append the template extension to a path that has none.

        Example:
            >>> settings = AppSettings()
            >>> settings.extension_apply(Path("partials/footer"))
            PosixPath('partials/footer.kit')
        """
        if path.suffix:
            return path
        return path.with_name(path.name + self.template_extension)


# Singleton instance - import this in your code
appsettings = AppSettings()
