"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter, TaskStats) + JSON mapping
- task_store.py: CRUD store persisted as one collection under a single storage key
"""
