"""Contact Passports test suite.

Runs against temporary SQLite databases through aiosqlite; no external
services are required.
"""
