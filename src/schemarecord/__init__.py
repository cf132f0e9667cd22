"""
schemarecord: schema-driven records for relational tables.

Entities are described by the database itself. A Record given only a table
name learns its columns, keys and relations by introspection.
"""

__version__ = "0.1.0"
