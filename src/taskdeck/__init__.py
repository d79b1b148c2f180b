"""
taskdeck: client-side state layer for a task list and a remote posts browser.

Subpackages:
- storage: persistent key-value store over a synchronous substrate
- tasks: task entities and the CRUD task store
- remote: HTTP client for the posts/users/comments resource + aggregation
- views: request executor, debounced search controller, pagination window
- cli: console front end
"""

__version__ = "0.1.0"
