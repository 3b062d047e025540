"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use ORGDOWN_ prefix (e.g., ORGDOWN_ENABLE_INCLUDE_FILES=true).

Settings can also be loaded from a .env file in the project root.

The environment is only consulted here. options_resolve() turns these
process-wide defaults into explicit ParserOptions values once, at the
boundary, so the parser itself never looks at the environment.
"""

import dataclasses
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.options import ParserOptions


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use ORGDOWN_ prefix.

    Examples:
        ORGDOWN_ENABLE_INCLUDE_FILES=true
        ORGDOWN_INCLUDE_ROOT=/srv/notes
        ORGDOWN_PYGMENTS_STYLE=friendly
    """

    model_config = SettingsConfigDict(
        env_prefix="ORGDOWN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Include-file configuration
    enable_include_files: bool = Field(
        default=False,
        description="Expand #+INCLUDE directives unless a caller explicitly disables them",
    )

    include_root: Optional[str] = Field(
        default=None,
        description="Restrict #+INCLUDE targets to this directory tree (also enables includes)",
    )

    max_include_depth: int = Field(
        default=8,
        description="Maximum nesting of #+INCLUDE directives before further ones are skipped",
    )

    # Inline rewrite configuration
    snippet_prefix: str = Field(
        default="\x00SNIPPET_",
        description="Prefix for protected inline snippets (uses null byte to avoid collisions)",
    )

    snippet_suffix: str = Field(
        default="\x00",
        description="Suffix for protected inline snippets (uses null byte to avoid collisions)",
    )

    # Output configuration
    pygments_style: str = Field(
        default="default",
        description="Pygments style used when highlighting #+BEGIN_SRC blocks in HTML",
    )

    def placeHolder_make(self, index: int) -> str:
        """
        Generate a placeholder string for a protected snippet at given index.

        Args:
            index: Zero-based index of the snippet on the rewrite stack

        Returns:
            Placeholder string (e.g., "\\x00SNIPPET_0\\x00")

        Example:
            >>> settings = AppSettings()
            >>> settings.placeHolder_make(0)
            '\\x00SNIPPET_0\\x00'
        """
        return f"{self.snippet_prefix}{index}{self.snippet_suffix}"

    def snippetIndex_extract(self, placeholder: str) -> int | None:
        """
        Extract the snippet index from a placeholder string.

        Args:
            placeholder: Placeholder string to parse

        Returns:
            Snippet index if valid placeholder, None otherwise

        Example:
            >>> settings = AppSettings()
            >>> settings.snippetIndex_extract('\\x00SNIPPET_3\\x00')
            3
        """
        if not placeholder.startswith(self.snippet_prefix):
            return None
        if not placeholder.endswith(self.snippet_suffix):
            return None

        content = placeholder[len(self.snippet_prefix) : -len(self.snippet_suffix)]

        try:
            return int(content)
        except ValueError:
            return None


def options_resolve(
    options: Optional[ParserOptions] = None, settings: Optional[AppSettings] = None
) -> ParserOptions:
    """
    Resolve environment-driven defaults into explicit parser options.

    Include expansion is switched on by either the enable flag or a
    configured include root, unless the caller already passed an explicit
    True/False. A root configured in the environment applies whenever the
    caller did not give one.

    Args:
        options: Caller options (None means all defaults)
        settings: Settings to resolve against (defaults to the singleton)

    Returns:
        A new ParserOptions with allow_include_files set to a bool

    Example:
        >>> options_resolve(ParserOptions(), AppSettings(enable_include_files=True)).allow_include_files
        True
    """
    settings = settings or appsettings
    options = options or ParserOptions()

    include_root = options.include_root or settings.include_root
    allow = options.allow_include_files
    if allow is None:
        allow = settings.enable_include_files or settings.include_root is not None

    max_depth = options.max_include_depth
    if max_depth is None:
        max_depth = settings.max_include_depth

    return dataclasses.replace(
        options,
        allow_include_files=bool(allow),
        include_root=include_root,
        max_include_depth=max_depth,
    )


# Singleton instance - import this in your code
appsettings = AppSettings()
