"""Build Typer commands from the resource registry."""

from restcli.generator.command_tree import attach_resource_commands

__all__ = ["attach_resource_commands"]
