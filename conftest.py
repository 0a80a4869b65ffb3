"""Pytest configuration for redshift-mcp tests.

This module provides global pytest configuration and custom warning filters.
"""

import warnings

# Catalog models use a 'schema' field for database schema names, which
# shadows the deprecated BaseModel.schema attribute.
warnings.filterwarnings(
    "ignore",
    message=r".*Field name \"schema\".*shadows an attribute.*",
    category=UserWarning,
)
