"""
Goal tracker service: goals, tasks and derived progress behind a REST API.
"""

__version__ = "1.0.0"
