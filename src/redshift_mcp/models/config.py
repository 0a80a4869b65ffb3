"""Database configuration model."""

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field, SecretStr, field_validator
from sqlalchemy.engine import URL

REQUIRED_ENV_VARS = (
    "REDSHIFT_HOST",
    "REDSHIFT_DATABASE",
    "REDSHIFT_USER",
    "REDSHIFT_PASSWORD",
)


class DatabaseConfig(BaseModel):
    """Connection endpoint, default schemas and pool settings for the warehouse."""

    host: str = Field(..., min_length=1, description="Cluster endpoint hostname")
    port: int = Field(default=5439, ge=1, le=65535, description="Cluster port")
    database: str = Field(..., min_length=1, description="Database name")
    user: str = Field(..., min_length=1, description="Database user")
    password: SecretStr = Field(..., description="Database password")
    schemas: tuple[str, ...] = Field(
        default=("public",),
        description="Schemas used when a caller does not name any",
    )
    empty_schemas: Literal["defaults", "empty"] = Field(
        default="defaults",
        description=(
            "What list_tables does with an explicit empty schema list: "
            "'defaults' falls back to the configured schemas, 'empty' returns nothing"
        ),
    )
    pool_size: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Connection pool size",
    )
    max_overflow: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Maximum overflow connections",
    )
    pool_timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Pool checkout timeout in seconds",
    )
    echo_sql: bool = Field(
        default=False,
        description="Echo SQL statements to the log",
    )

    @field_validator("schemas", mode="before")
    @classmethod
    def split_schemas(cls, v):
        """Accept a comma separated string and drop blank entries."""
        if isinstance(v, str):
            v = v.split(",")
        cleaned = tuple(s.strip() for s in v if s and s.strip())
        if not cleaned:
            raise ValueError("At least one default schema is required")
        return cleaned

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DatabaseConfig":
        """
        Build configuration from REDSHIFT_* environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Validated configuration

        Raises:
            ValueError: If a required variable is missing
        """
        env = os.environ if environ is None else environ

        for name in REQUIRED_ENV_VARS:
            if not env.get(name):
                raise ValueError(f"Missing required environment variable: {name}")

        values: dict[str, object] = {
            "host": env["REDSHIFT_HOST"],
            "database": env["REDSHIFT_DATABASE"],
            "user": env["REDSHIFT_USER"],
            "password": env["REDSHIFT_PASSWORD"],
            "schemas": env.get("REDSHIFT_SCHEMAS") or "public",
        }
        optional = {
            "port": "REDSHIFT_PORT",
            "pool_size": "REDSHIFT_POOL_SIZE",
            "max_overflow": "REDSHIFT_MAX_OVERFLOW",
            "pool_timeout": "REDSHIFT_POOL_TIMEOUT",
            "empty_schemas": "REDSHIFT_EMPTY_SCHEMAS",
            "echo_sql": "REDSHIFT_ECHO_SQL",
        }
        for field, name in optional.items():
            if env.get(name):
                values[field] = env[name]

        return cls.model_validate(values)

    @property
    def url(self) -> URL:
        """SQLAlchemy URL for the async psycopg driver."""
        return URL.create(
            "postgresql+psycopg",
            username=self.user,
            password=self.password.get_secret_value(),
            host=self.host,
            port=self.port,
            database=self.database,
        )

    @property
    def safe_url(self) -> str:
        """Connection URL with the password masked, for logging."""
        return self.url.render_as_string(hide_password=True)

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "host": "examplecluster.abc123xyz789.us-west-1.redshift.amazonaws.com",
                    "port": 5439,
                    "database": "dev",
                    "user": "awsuser",
                    "password": "********",
                    "schemas": ["public", "analytics"],
                    "empty_schemas": "defaults",
                    "pool_size": 5,
                    "max_overflow": 10,
                }
            ]
        },
    }
