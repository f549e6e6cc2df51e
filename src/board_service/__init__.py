"""Join board service.

Task board and contact book engine for the Join kanban app: four status
arrays of tasks, an address book whose entries are copied into tasks,
and per-user documents kept in a path-addressed remote JSON store.
"""

__version__ = "0.1.0"
