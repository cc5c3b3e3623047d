"""Command-line interface for aix.

One module per command group (skill, agent, command, mcp, backup,
config); ``aix.cli.main`` assembles them into the ``aix`` app.
"""
