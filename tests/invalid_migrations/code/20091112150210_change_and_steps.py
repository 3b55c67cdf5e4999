"""
a migration that is both declarative and procedural
"""

from depot.schema import Column, CreateTable

change = CreateTable("stations", [Column("id", primary_key=True)])


def upgrade(connection):
    change.apply(connection)


def downgrade(connection):
    change.revert(connection)
