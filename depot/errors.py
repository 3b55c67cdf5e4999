# errors


class Error(Exception):
    """Base class for all depot errors."""

    pass


class InvalidMigrationError(Error):
    """Thrown when a client migration contains an error."""

    pass


class InvalidNameError(Error):
    """Thrown when a client migration has an invalid filename."""

    def __init__(self, filename):
        msg = (
            "Migration filenames must start with a UTC timestamp. "
            "The following file has an invalid name: %s" % filename
        )
        super(InvalidNameError, self).__init__(msg)


class InvalidSchemaError(Error):
    """Thrown when a schema change or column descriptor is malformed."""

    pass


class SchemaConflictError(Error):
    """Thrown when a schema change creates a table that already exists."""

    def __init__(self, table_name):
        self.table_name = table_name
        msg = "Table %s already exists." % table_name
        super(SchemaConflictError, self).__init__(msg)


class SchemaNotFoundError(Error):
    """Thrown when a schema change drops a table that does not exist."""

    def __init__(self, table_name):
        self.table_name = table_name
        msg = "Table %s does not exist." % table_name
        super(SchemaNotFoundError, self).__init__(msg)
