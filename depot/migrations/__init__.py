"""Migrations shipped with depot, in version order."""
