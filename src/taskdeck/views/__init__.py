"""
View-state layer consumed by a presentation front end.

Components:
- request_executor.py: generic async-call state container (idle/pending/fulfilled/rejected)
- search_controller.py: debounced search + paging over the posts aggregator
- pagination.py: sliding window of visible page numbers
"""
