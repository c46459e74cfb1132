#!/usr/bin/env python3
"""hostmend CLI - host health checks and routine maintenance."""

import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from hostmend.command.checks import ChecksCommand
from hostmend.command.updates import UpdatesCommand
from hostmend.core.config import State


class CliState(State):
    """Check the health of this machine and run standard remediation.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.tools.volume D:)
    2. hostmend.yaml in the current directory, the user config
       directory, and any --include files
    3. .env file
    4. Environment variables (HOSTMEND_CONFIG__TOOLS__VOLUME=D:)

    Most operations need an elevated (Administrator) prompt.
    """

    checks: CliSubCommand[ChecksCommand]
    updates: CliSubCommand[UpdatesCommand]

    def cli_cmd(self):
        """Dispatch to the active subcommand, or show help."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        # Closing the state flushes and closes the log sinks
        with self:
            exit_code = subcommand.run_workflow(self)
        raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
