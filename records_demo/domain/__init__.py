"""
Domain package for the records demo.

Exports the data definitions shared by the repository, runner and reporter.
"""

from records_demo.domain.models import DemoPlan, Record

__all__ = [
    "DemoPlan",
    "Record",
]
