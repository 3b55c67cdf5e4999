"""
a migration with an invalid filename
"""


def upgrade(connection):
    pass


def downgrade(connection):
    pass
