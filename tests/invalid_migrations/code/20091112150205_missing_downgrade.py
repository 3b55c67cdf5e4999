"""
a migration without a downgrade step
"""


def upgrade(connection):
    connection.execute("CREATE TABLE stations (id TEXT, name TEXT)")
