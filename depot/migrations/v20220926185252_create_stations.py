"""
This module contains a depot migration.

Migration Name: create_stations
Migration Version: 20220926185252
"""

from depot.schema import STRING, Column, CreateTable

change = CreateTable(
    "stations",
    [
        Column("id", STRING, primary_key=True),
        Column("name", STRING),
    ],
)
