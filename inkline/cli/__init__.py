"""
InkLine command-line client.

Built with Typer for commands and Rich for output, on top of the client core.
"""
