"""
Command Line Layer.

Argument parsing, console reporting, and the Typer entry point.
"""
