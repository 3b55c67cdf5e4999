"""
depot is a simple SQLite database migrations library. It ships the schema of
a transit timetable database as declarative, reversible schema changes.
"""

__version__ = "0.1.0"


# public API
from .errors import (
    Error,
    InvalidMigrationError,
    InvalidNameError,
    InvalidSchemaError,
    SchemaConflictError,
    SchemaNotFoundError,
)
from .migrate import (
    STATIONS_MIGRATIONS,
    create_migration,
    downgrade,
    execute,
    get_version,
    load_migrations,
    Migration,
    transaction,
    upgrade,
)
from .schema import (
    Catalog,
    Column,
    CreateTable,
    DropTable,
    SchemaChange,
    SqliteSchema,
)
