"""Root Click group for stackctl.

Usage errors raised anywhere below the root (unknown subcommands, bad
arguments, missing options) are reported as a single error line followed by
a pointer to the help page of the command that failed.
"""

from typing import Any

import click


class StackctlGroup(click.Group):
    """Click group that points at the failing command's help on usage errors."""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            # e.ctx is the innermost context, e.g. `mongodbflex instance update`
            error_ctx = e.ctx or ctx
            click.echo(f"Error: {e.format_message()}", err=True)
            click.echo(f"Run '{error_ctx.command_path} --help' for usage.", err=True)
            error_ctx.exit(e.exit_code)
