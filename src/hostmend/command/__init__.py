"""CLI command modules for hostmend."""

from hostmend.command.checks import ChecksCommand
from hostmend.command.updates import UpdatesCommand

__all__ = ["ChecksCommand", "UpdatesCommand"]
