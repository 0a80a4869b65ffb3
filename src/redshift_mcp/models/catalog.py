"""Catalog metadata models: tables, columns and per-table schema results."""

from enum import Enum

from pydantic import BaseModel, Field


class TableKind(str, Enum):
    """Relation kinds reported by information_schema.tables."""

    BASE_TABLE = "BASE TABLE"
    VIEW = "VIEW"
    MATERIALIZED_VIEW = "MATERIALIZED VIEW"


class TableDescriptor(BaseModel):
    """A table, view or materialized view in a schema."""

    schema: str = Field(..., description="Schema name")
    name: str = Field(..., description="Table name")
    type: TableKind = Field(..., description="Relation kind")
    description: str = Field(default="", description="Table comment, empty if none")

    @property
    def qualified_name(self) -> str:
        """schema.name"""
        return f"{self.schema}.{self.name}"


class ColumnDescriptor(BaseModel):
    """A column of a table, as reported by the catalog."""

    name: str = Field(..., description="Column name")
    data_type: str = Field(
        ..., alias="dataType", description="Declared data type as reported by the catalog"
    )
    is_nullable: bool = Field(
        ..., alias="isNullable", description="Whether the column accepts NULL"
    )
    description: str = Field(default="", description="Column comment, empty if none")

    model_config = {"populate_by_name": True}


class TableRef(BaseModel):
    """A (schema, table) pair named in a schema lookup request."""

    schema: str = Field(..., description="Schema name")
    table: str = Field(..., description="Table name")


class TableSchemaResult(BaseModel):
    """Columns of one requested table, in ordinal position order."""

    schema: str = Field(..., description="Schema name")
    table: str = Field(..., description="Table name")
    columns: list[ColumnDescriptor] = Field(
        default_factory=list,
        description="Columns in ordinal order; empty when the table does not exist",
    )
