"""
a migration without an upgrade step
"""


def downgrade(connection):
    connection.execute("drop table stations")
