"""
Example: create and drop the stations table.

The packaged migrations can be run from their directory, or imported and
passed as a list of modules (works inside PyInstaller bundles and other
environments where filesystem discovery is not available).

Run from the repo root:
    python examples/stations.py
"""

import os
import sqlite3
import depot

from depot.migrations import v20220926185252_create_stations

HERE = os.path.dirname(os.path.abspath(__file__))
DB = os.path.join(HERE, "example.db")
MODULES = [v20220926185252_create_stations]


def show(label):
    conn = sqlite3.connect(DB)
    tables = depot.SqliteSchema(conn).table_names()
    version = depot.get_version(DB)
    print(f"  {label}: version={version} tables={tables}")
    conn.close()


def main():
    # clean slate
    if os.path.exists(DB):
        os.remove(DB)

    print("Directory migrations")
    depot.upgrade(DB, depot.STATIONS_MIGRATIONS)
    show("after upgrade")
    depot.downgrade(DB, depot.STATIONS_MIGRATIONS, "0")
    show("after downgrade")

    print("Module migrations")
    depot.upgrade(DB, MODULES)
    show("after upgrade")
    depot.downgrade(DB, MODULES, "0")
    show("after downgrade")

    os.remove(DB)


if __name__ == "__main__":
    main()
