"""
a migration that cannot be imported
"""

import me_no_existy


def upgrade(connection):
    connection.execute("CREATE TABLE stations (id TEXT, name TEXT)")


def downgrade(connection):
    connection.execute("drop table stations")
