"""
taskboard: a small task-tracking backend on FastAPI + SQLite.
"""

__version__ = "0.1.0"
