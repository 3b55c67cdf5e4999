import contextlib
import datetime
import glob
import logging
import os.path
import sqlite3
import traceback
from importlib.util import module_from_spec, spec_from_file_location

from .errors import Error, InvalidMigrationError, InvalidNameError
from .schema import VERSION_TABLE, SchemaChange, SqliteSchema

logger = logging.getLogger(__name__)

# statics

UTC_LENGTH = 14

STATIONS_MIGRATIONS = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "migrations"
)

# code


@contextlib.contextmanager
def execute(conn, sql, params=None):
    params = [] if params is None else params
    cursor = conn.execute(sql, params)
    try:
        yield cursor
    finally:
        cursor.close()


@contextlib.contextmanager
def transaction(conn):
    try:
        yield
        conn.commit()
    except Exception:
        conn.rollback()
        raise


def has_method(an_object, name):
    return callable(getattr(an_object, name, None))


def is_directory(path):
    return os.path.exists(path) and os.path.isdir(path)


def parse_version(module_name):
    """Split a migration module name into its version and name. Module
    names may carry a 'v' prefix so they can be imported as package members.
    """
    stem = module_name[1:] if module_name.startswith("v") else module_name
    timestamp = stem[:UTC_LENGTH]
    if len(timestamp) < UTC_LENGTH or not timestamp.isdigit():
        raise InvalidNameError(module_name)
    return timestamp, stem[UTC_LENGTH:].lstrip("_")


def _load_source(module_name, path):
    spec = spec_from_file_location(module_name, path)
    if spec is None:
        raise ImportError("Cannot load %s" % path)
    module = module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class Migration(object):
    """This class represents a migration version. A migration module either
    defines upgrade(connection) and downgrade(connection), or a schema
    change named `change` whose inverse is used to downgrade.
    """

    def __init__(self, path, module=None):
        self.path = path
        self.filename = os.path.basename(path)
        if module is not None:
            self.module_name = module.__name__.rsplit(".", 1)[-1]
        else:
            self.module_name, _ = os.path.splitext(self.filename)
        # will assert the filename is valid
        self.version, self.name = parse_version(self.module_name)
        if module is None:
            try:
                module = _load_source(self.module_name, path)
            except Exception:
                msg = "Invalid migration %s: %s" % (path, traceback.format_exc())
                raise InvalidMigrationError(msg)
        self.module = module
        self.change = getattr(module, "change", None)
        targets = ["upgrade", "downgrade"]
        if self.change is not None:
            if not isinstance(self.change, SchemaChange):
                msg = "Migration %s defines a change that is not a SchemaChange." % (
                    self.path
                )
                raise InvalidMigrationError(msg)
            if any(has_method(module, m) for m in targets):
                msg = (
                    "Migration %s must define either a change or upgrade and "
                    "downgrade methods, not both." % self.path
                )
                raise InvalidMigrationError(msg)
            return
        # assert the migration has the needed methods
        missing = [m for m in targets if not has_method(module, m)]
        if missing:
            msg = "Migration %s is missing required methods: %s." % (
                self.path,
                ", ".join(missing),
            )
            raise InvalidMigrationError(msg)

    @classmethod
    def from_module(cls, module):
        path = getattr(module, "__file__", None) or module.__name__
        return cls(path, module=module)

    def get_version(self):
        return self.version

    def upgrade(self, conn):
        if self.change is not None:
            self.change.apply(SqliteSchema(conn))
        else:
            self.module.upgrade(conn)

    def downgrade(self, conn):
        if self.change is not None:
            self.change.revert(SqliteSchema(conn))
        else:
            self.module.downgrade(conn)

    def __repr__(self):
        return "Migration(%s)" % self.filename


class Database(object):

    def __init__(self, db_url):
        self.db_url = db_url
        self.conn = sqlite3.connect(db_url)

    def close(self):
        self.conn.close()

    def is_version_controlled(self):
        sql = """select *
                   from sqlite_master
                  where type = 'table'
                    and name = :1 collate nocase"""
        with execute(self.conn, sql, [VERSION_TABLE]) as cursor:
            return bool(cursor.fetchall())

    def upgrade(self, migrations, target_version=None):
        if target_version is not None:
            target_version = str(target_version)
        if target_version:
            _assert_migration_exists(migrations, target_version)

        migrations.sort(key=lambda x: x.get_version())
        database_version = self.get_version()

        for migration in migrations:
            current_version = migration.get_version()
            if current_version <= database_version:
                logger.debug("Skipping applied migration %s", migration)
                continue
            if target_version and current_version > target_version:
                break
            logger.info("Upgrading %s with %s", self.db_url, migration)
            with transaction(self.conn):
                migration.upgrade(self.conn)
                self._set_version(current_version)

    def downgrade(self, migrations, target_version):
        target_version = str(target_version)
        if target_version != "0":
            _assert_migration_exists(migrations, target_version)

        migrations.sort(key=lambda x: x.get_version(), reverse=True)
        database_version = self.get_version()

        for i, migration in enumerate(migrations):
            current_version = migration.get_version()
            if current_version > database_version:
                logger.debug("Skipping unapplied migration %s", migration)
                continue
            if current_version <= target_version:
                break
            next_version = "0"
            # if an earlier migration exists, set the db version to
            # its version number
            if i < len(migrations) - 1:
                next_migration = migrations[i + 1]
                next_version = next_migration.get_version()
            logger.info("Downgrading %s with %s", self.db_url, migration)
            with transaction(self.conn):
                migration.downgrade(self.conn)
                self._set_version(next_version)

    def get_version(self):
        """Return the database's version, or None if it is not under version
        control.
        """
        if not self.is_version_controlled():
            return None
        sql = "select version from %s" % VERSION_TABLE
        with execute(self.conn, sql) as cursor:
            result = cursor.fetchall()
            return result[0][0] if result else "0"

    def update_version(self, version):
        with transaction(self.conn):
            self._set_version(version)

    def _set_version(self, version):
        sql = "update %s set version = :1" % VERSION_TABLE
        self.conn.execute(sql, [version])
        logger.info("%s is now at version %s", self.db_url, version)

    def initialize_version_control(self):
        sql = (
            """ create table if not exists %s
                  ( version text ) """
            % VERSION_TABLE
        )
        with transaction(self.conn):
            self.conn.execute(sql)
            self.conn.execute("insert into %s values ('0')" % VERSION_TABLE)

    def __repr__(self):
        return 'Database("%s")' % self.db_url


def _assert_migration_exists(migrations, version):
    if version not in (m.get_version() for m in migrations):
        raise Error("No migration with version %s exists." % version)


def load_migrations(directory):
    """Return the migrations contained in the given directory."""
    if not is_directory(directory):
        msg = "%s is not a directory." % directory
        raise Error(msg)
    wildcard = os.path.join(directory, "*.py")
    migration_files = [
        f for f in glob.glob(wildcard) if os.path.basename(f) != "__init__.py"
    ]
    return [Migration(f) for f in migration_files]


def get_migrations(migrations):
    """Return migrations for a directory path or a list of already imported
    migration modules.
    """
    if isinstance(migrations, (str, os.PathLike)):
        return load_migrations(os.fspath(migrations))
    return [
        m if isinstance(m, Migration) else Migration.from_module(m)
        for m in migrations
    ]


def upgrade(db_url, migrations, version=None):
    """Upgrade the given database with the given migrations, either a
    directory or a list of migration modules. If a version is not specified,
    upgrade to the most recent version.
    """
    with contextlib.closing(Database(db_url)) as db:
        if not db.is_version_controlled():
            db.initialize_version_control()
        db.upgrade(get_migrations(migrations), version)


def downgrade(db_url, migrations, version):
    """Downgrade the database to the given version with the given
    migrations. Version "0" reverts every migration.
    """
    with contextlib.closing(Database(db_url)) as db:
        if not db.is_version_controlled():
            msg = "The database %s is not version controlled." % (db_url)
            raise Error(msg)
        db.downgrade(get_migrations(migrations), version)


def get_version(db_url):
    """Return the migration version of the given database."""
    with contextlib.closing(Database(db_url)) as db:
        return db.get_version()


def create_migration(name, directory=None):
    """Create a migration with the given name. If no directory is specified,
    the current working directory will be used.
    """
    directory = directory if directory else "."
    if not is_directory(directory):
        msg = "%s is not a directory." % directory
        raise Error(msg)

    now = datetime.datetime.now()
    version = now.strftime("%Y%m%d%H%M%S")

    contents = MIGRATION_TEMPLATE % {"name": name, "version": version}

    name = name.replace(" ", "_")
    filename = "v%s_%s.py" % (version, name)
    path = os.path.join(directory, filename)
    try:
        migration_file = open(path, "x")
    except FileExistsError:
        raise Error("Migration %s already exists." % path)
    with migration_file:
        migration_file.write(contents)
    logger.info("Created migration %s", path)
    return path


MIGRATION_TEMPLATE = """\
\"\"\"
This module contains a depot migration.

Migration Name: %(name)s
Migration Version: %(version)s
\"\"\"

# a declarative migration defines `change`, e.g.
#
#   from depot.schema import Column, CreateTable, STRING
#
#   change = CreateTable("platforms", [Column("id", STRING, primary_key=True)])
#
# and is downgraded by its inverse. Otherwise define both steps below.

def upgrade(connection):
    # add your upgrade step here
    pass

def downgrade(connection):
    # add your downgrade step here
    pass
"""
