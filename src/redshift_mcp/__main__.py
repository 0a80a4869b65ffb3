"""Entry point for running redshift_mcp as a module."""

from redshift_mcp.server import cli_entry

if __name__ == "__main__":
    cli_entry()
