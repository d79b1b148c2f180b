"""
Storage subsystem.

Components:
- substrates.py: synchronous key-value substrates (SQLite on disk, in-memory)
- persistent_store.py: JSON read/write with fault isolation + key-bound PersistentValue
- theme.py: dark-mode preference persisted through the same primitive
"""
