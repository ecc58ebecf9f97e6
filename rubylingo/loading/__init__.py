"""Dictionary import into the SQLite database."""
