"""
a migration whose change is raw sql
"""

change = "CREATE TABLE stations (id TEXT, name TEXT)"
