"""External formatter integration for nofmt."""

from nofmt.runner.client import FormatterClient
from nofmt.runner.command import PLACEHOLDER, build_command, with_error_flag

__all__ = [
    "FormatterClient",
    "PLACEHOLDER",
    "build_command",
    "with_error_flag",
]
