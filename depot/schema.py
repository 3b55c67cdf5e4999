"""
Declarative schema changes and the catalogs they are applied to.

A schema change is a plain descriptor of one DDL operation, e.g.

    change = CreateTable(
        "stations",
        [Column("id", STRING, primary_key=True), Column("name", STRING)],
    )

Applying it to a schema handle creates the table; reverting it applies the
paired inverse (dropping the table). Handles are either a live SQLite
database (SqliteSchema) or an in-memory Catalog.
"""

import contextlib
import logging
from dataclasses import dataclass

from .errors import InvalidSchemaError, SchemaConflictError, SchemaNotFoundError

logger = logging.getLogger(__name__)

# statics

VERSION_TABLE = "migration_version"

STRING = "string"
TEXT = "text"
INTEGER = "integer"
FLOAT = "float"
BOOLEAN = "boolean"
DATETIME = "datetime"

# strings render as VARCHAR, not STRING, which SQLite would give NUMERIC
# affinity
COLUMN_TYPES = {
    STRING: "VARCHAR",
    TEXT: "TEXT",
    INTEGER: "INTEGER",
    FLOAT: "REAL",
    BOOLEAN: "BOOLEAN",
    DATETIME: "DATETIME",
}

SQL_TYPES = dict((sql, name) for name, sql in COLUMN_TYPES.items())


def quote(identifier):
    return '"%s"' % identifier.replace('"', '""')


@dataclass(frozen=True)
class Column(object):
    """One column of a table. Primary keys are never nullable; when
    nullable is left unset it defaults to True for every other column.
    """

    name: str
    type: str = STRING
    nullable: bool = None
    primary_key: bool = False

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise InvalidSchemaError("Column names must be non-empty strings.")
        if not isinstance(self.type, str) or self.type not in COLUMN_TYPES:
            msg = "Column %s has an unknown type: %r." % (self.name, self.type)
            raise InvalidSchemaError(msg)
        if not isinstance(self.primary_key, bool):
            msg = "Column %s has a non-boolean primary_key." % self.name
            raise InvalidSchemaError(msg)
        if self.nullable is not None and not isinstance(self.nullable, bool):
            msg = "Column %s has a non-boolean nullable." % self.name
            raise InvalidSchemaError(msg)
        if self.nullable is None:
            object.__setattr__(self, "nullable", not self.primary_key)
        elif self.primary_key and self.nullable:
            msg = "Primary key column %s cannot be nullable." % self.name
            raise InvalidSchemaError(msg)

    def to_sql(self):
        sql = "%s %s" % (quote(self.name), COLUMN_TYPES[self.type])
        if self.primary_key:
            sql += " PRIMARY KEY"
        if not self.nullable:
            sql += " NOT NULL"
        return sql

    def to_dict(self):
        return {
            "name": self.name,
            "type": self.type,
            "nullable": self.nullable,
            "primary_key": self.primary_key,
        }

    @classmethod
    def from_dict(cls, data):
        try:
            return cls(
                name=data["name"],
                type=data.get("type", STRING),
                nullable=data.get("nullable"),
                primary_key=data.get("primary_key", False),
            )
        except (KeyError, TypeError, AttributeError):
            raise InvalidSchemaError("Malformed column: %r" % (data,))


class SchemaChange(object):
    """A named, reversible description of one schema operation."""

    op = None

    def apply(self, schema):
        raise NotImplementedError

    def inverse(self):
        raise NotImplementedError

    def revert(self, schema):
        """Undo this change by applying its inverse."""
        self.inverse().apply(schema)

    def to_dict(self):
        raise NotImplementedError

    @staticmethod
    def from_dict(data):
        """Build a schema change from the output of to_dict()."""
        try:
            op = data["op"]
            table_name = data["table_name"]
            columns = [Column.from_dict(c) for c in data["columns"]]
        except (KeyError, TypeError):
            raise InvalidSchemaError("Malformed schema change: %r" % (data,))
        changes = dict((c.op, c) for c in (CreateTable, DropTable))
        if not isinstance(op, str) or op not in changes:
            raise InvalidSchemaError("Unknown schema operation: %r." % (op,))
        return changes[op](table_name, columns)


@dataclass(frozen=True)
class TableChange(SchemaChange):

    table_name: str
    columns: tuple

    def __post_init__(self):
        if not isinstance(self.table_name, str) or not self.table_name:
            raise InvalidSchemaError("Table names must be non-empty strings.")
        if isinstance(self.columns, (str, bytes)):
            msg = "Table %s has columns that are not Columns." % self.table_name
            raise InvalidSchemaError(msg)
        try:
            object.__setattr__(self, "columns", tuple(self.columns))
        except TypeError:
            msg = "Table %s has columns that are not Columns." % self.table_name
            raise InvalidSchemaError(msg)
        if not self.columns:
            msg = "Table %s must have at least one column." % self.table_name
            raise InvalidSchemaError(msg)
        if not all(isinstance(c, Column) for c in self.columns):
            msg = "Table %s has columns that are not Columns." % self.table_name
            raise InvalidSchemaError(msg)
        # sqlite identifiers are case-insensitive
        names = [c.name.lower() for c in self.columns]
        duplicates = sorted(set(n for n in names if names.count(n) > 1))
        if duplicates:
            msg = "Table %s has duplicate columns: %s." % (
                self.table_name,
                ", ".join(duplicates),
            )
            raise InvalidSchemaError(msg)
        if len([c for c in self.columns if c.primary_key]) > 1:
            msg = "Table %s has more than one primary key." % self.table_name
            raise InvalidSchemaError(msg)

    def to_dict(self):
        return {
            "op": self.op,
            "table_name": self.table_name,
            "columns": [c.to_dict() for c in self.columns],
        }


@dataclass(frozen=True)
class CreateTable(TableChange):

    op = "create_table"

    def apply(self, schema):
        if schema.has_table(self.table_name):
            raise SchemaConflictError(self.table_name)
        logger.info("Creating table %s", self.table_name)
        schema.create_table(self.table_name, self.columns)

    def inverse(self):
        return DropTable(self.table_name, self.columns)


@dataclass(frozen=True)
class DropTable(TableChange):
    """Drops a table. The columns are kept so the drop can be inverted."""

    op = "drop_table"

    def apply(self, schema):
        if not schema.has_table(self.table_name):
            raise SchemaNotFoundError(self.table_name)
        logger.info("Dropping table %s", self.table_name)
        schema.drop_table(self.table_name)

    def inverse(self):
        return CreateTable(self.table_name, self.columns)


class Catalog(object):
    """An in-memory schema: a mapping of table names to their columns."""

    def __init__(self, tables=None):
        tables = tables or {}
        self.tables = dict((n, tuple(cols)) for n, cols in tables.items())

    def has_table(self, name):
        return name in self.tables

    def get_table(self, name):
        return self.tables.get(name)

    def table_names(self):
        return sorted(self.tables)

    def create_table(self, name, columns):
        if name in self.tables:
            raise SchemaConflictError(name)
        self.tables[name] = tuple(columns)

    def drop_table(self, name):
        if name not in self.tables:
            raise SchemaNotFoundError(name)
        del self.tables[name]

    def copy(self):
        return Catalog(self.tables)

    def __eq__(self, other):
        if not isinstance(other, Catalog):
            return NotImplemented
        return self.tables == other.tables

    __hash__ = None

    def __repr__(self):
        return "Catalog(%s)" % ", ".join(self.table_names())


class SqliteSchema(object):
    """A schema handle over an open sqlite3 connection."""

    def __init__(self, conn):
        self.conn = conn

    def has_table(self, name):
        sql = """select 1
                   from sqlite_master
                  where type = 'table'
                    and name = :1 collate nocase"""
        with contextlib.closing(self.conn.execute(sql, [name])) as cursor:
            return cursor.fetchone() is not None

    def get_table(self, name):
        """Return the table's columns in order, or None if it doesn't exist."""
        sql = "pragma table_info(%s)" % quote(name)
        with contextlib.closing(self.conn.execute(sql)) as cursor:
            rows = cursor.fetchall()
        if not rows:
            return None
        columns = []
        for _, column_name, sql_type, notnull, _, pk in rows:
            if sql_type.upper() not in SQL_TYPES:
                msg = "Column %s.%s has an unsupported type: %s." % (
                    name,
                    column_name,
                    sql_type,
                )
                raise InvalidSchemaError(msg)
            columns.append(
                Column(
                    column_name,
                    SQL_TYPES[sql_type.upper()],
                    nullable=not (notnull or pk),
                    primary_key=bool(pk),
                )
            )
        return tuple(columns)

    def table_names(self):
        sql = """select name
                   from sqlite_master
                  where type = 'table'
                    and name not like 'sqlite_%%'
                    and name != '%s'
                  order by name""" % VERSION_TABLE
        with contextlib.closing(self.conn.execute(sql)) as cursor:
            return [row[0] for row in cursor.fetchall()]

    def create_table(self, name, columns):
        sql = "create table %s (%s)" % (
            quote(name),
            ", ".join(c.to_sql() for c in columns),
        )
        logger.debug(sql)
        self.conn.execute(sql)

    def drop_table(self, name):
        sql = "drop table %s" % quote(name)
        logger.debug(sql)
        self.conn.execute(sql)

    def to_catalog(self):
        """Snapshot the database's tables into a Catalog."""
        return Catalog(dict((n, self.get_table(n)) for n in self.table_names()))

    def __repr__(self):
        return "SqliteSchema(%r)" % self.conn
