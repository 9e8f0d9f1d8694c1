"""User-facing output helpers."""

import click


def user_output(message: str = "", *, nl: bool = True) -> None:
    """Write a human-facing message to stderr, keeping stdout free for data."""
    click.echo(message, err=True, nl=nl)
