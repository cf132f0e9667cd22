"""Shared contracts: schema types, gateway protocol and errors.

This package is a leaf - it imports nothing from schemarecord.core.
"""

from schemarecord.contracts.errors import (
    ErrorCode,
    MissingParametersError,
    ModelNotFoundError,
    QueryError,
    RecordError,
    SchemaError,
    TransactionError,
    UnknownMethodError,
    UnknownPropertyError,
)
from schemarecord.contracts.gateway import DatabaseGateway
from schemarecord.contracts.schema import ColumnMetadata, ColumnState, ForeignKeyRef, RawSQL, Statement
from schemarecord.contracts.type_normalization import unify_data_type

__all__ = [
    "ColumnMetadata",
    "ColumnState",
    "DatabaseGateway",
    "ErrorCode",
    "ForeignKeyRef",
    "MissingParametersError",
    "ModelNotFoundError",
    "QueryError",
    "RawSQL",
    "RecordError",
    "SchemaError",
    "Statement",
    "TransactionError",
    "UnknownMethodError",
    "UnknownPropertyError",
    "unify_data_type",
]
