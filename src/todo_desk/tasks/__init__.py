"""
Task subsystem.

Components:
- task_models.py: data structures (Task, DateFilter, SaveState, SaveStatus)
- task_store.py: observable in-memory collection
- task_filter.py: date/tag filtering and the live filtered view
- task_persistence.py: JSON file repository guarded by a file lock
- autosave.py: debounced auto-save coordinator
- task_api.py: application service used by the shell
"""
