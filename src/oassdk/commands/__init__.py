"""Built-in CLI sub-commands for oassdk.

This package groups the Typer command modules that form the CLI's
top-level command tree:

* :mod:`~oassdk.commands.spec` -- ``validate``, ``resolve`` and ``schema``,
  the commands that run the core pipeline on one spec file.
* :mod:`~oassdk.commands.inspect` -- examine info, paths, schemas and tags
  of a spec.
* :mod:`~oassdk.commands.config` -- view and modify global settings.

Multi-command groups export a :class:`typer.Typer` sub-application; single
commands are plain callback functions registered on the root app.
"""
