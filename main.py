#!/usr/bin/env python
"""
Legacy entry point for redshift-mcp.

DEPRECATED: This file is kept for backward compatibility only.

Preferred ways to run the server:
1. If installed: redshift-mcp
2. As a module: python -m redshift_mcp
3. With uv: uv run redshift-mcp

This file will be removed in a future version.
"""

import sys
import warnings

from redshift_mcp.server import cli_entry

# Show deprecation warning
warnings.warn(
    "Running via main.py is deprecated. "
    "Use 'redshift-mcp' (if installed) or 'python -m redshift_mcp' instead.",
    DeprecationWarning,
    stacklevel=2,
)

if __name__ == "__main__":
    try:
        cli_entry()
    except KeyboardInterrupt:
        print("\nServer stopped by user")
        sys.exit(0)
    except Exception as e:
        print(f"Server error: {e}", file=sys.stderr)
        sys.exit(1)
