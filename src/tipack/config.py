"""
tipack Configuration
====================

Default values used when a pack request leaves something unspecified.
Configuration can come from:
- Default values (defined here)
- Environment variables

Environment variables (all optional):
    TIPACK_COMMENT:  Default file comment (strftime format if it contains %)
    TIPACK_BASENAME: Base name of the output file when reading standard
                     input without -o (the type is appended as extension)
"""

from dataclasses import dataclass, field
import os

from tipack.files.records import COMMENT_MAX


def _default_comment() -> str:
    # Imported late; tipack/__init__ imports this module
    from tipack import __version__
    return f"Created by tipack {__version__}"


@dataclass
class PackConfig:
    """
    Defaults for a pack run.

    Attributes:
        default_comment: Comment used when none is given
        default_basename: Output base name when reading standard input
            without an output path (default: "a", giving "a.8xp")
        comment_max: Maximum comment length in characters
    """

    default_comment: str = field(default_factory=_default_comment)
    default_basename: str = "a"
    comment_max: int = COMMENT_MAX

    @classmethod
    def from_env(cls) -> "PackConfig":
        """
        Create PackConfig from environment variables.

        Returns:
            PackConfig with values from TIPACK_COMMENT and TIPACK_BASENAME
        """
        config = cls()

        if comment := os.environ.get("TIPACK_COMMENT"):
            config.default_comment = comment

        if basename := os.environ.get("TIPACK_BASENAME"):
            config.default_basename = basename

        return config
