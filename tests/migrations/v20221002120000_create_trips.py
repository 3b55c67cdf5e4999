"""
trips, with a v-prefixed name
"""

from depot.schema import INTEGER, STRING, Column, CreateTable

change = CreateTable(
    "trips",
    [
        Column("trip_id", INTEGER, primary_key=True),
        Column("short_name", STRING),
        Column("headsign", STRING),
    ],
)
