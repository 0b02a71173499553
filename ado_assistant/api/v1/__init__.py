"""
API v1 routers.
"""

from ado_assistant.api.v1 import analyze, capacity, health, work_items

__all__ = ["analyze", "capacity", "health", "work_items"]
