"""Practice-time planning core for coached athletes.

Percentage plans, strict plan validation, time aggregation and gap-based
training recommendations for single athletes and groups.
"""

__version__ = "0.1.0"
