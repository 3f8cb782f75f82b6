"""
Domain models for the records demo.

`Record` mirrors one row of the demo table. `DemoPlan` holds the rows and
keys the demo sequence writes, defaulting to the classic walkthrough values.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class Record(BaseModel):
    """
    Representation of a single row in the demo table.

    `name` and `department` are nullable columns, so they may be None.
    """

    id: int = Field(..., description="Primary key, supplied by the caller.")
    name: Optional[str] = Field(..., description="Display name; the only mutable field.")
    department: Optional[str] = Field(..., description="Department label set at creation.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }


class DemoPlan(BaseModel):
    """
    Inputs for the write steps of the demo sequence.
    """

    insert_record: Record = Field(
        default_factory=lambda: Record(id=5, name="Karan", department="Sales"),
        description="Row inserted by the insert step.",
    )
    update_id: int = Field(2, description="Primary key targeted by the update step.")
    update_name: str = Field("Priya Sharma", description="Replacement name for the update step.")
    delete_id: int = Field(3, description="Primary key targeted by the delete step.")

    model_config = {"frozen": True}


__all__ = ["Record", "DemoPlan"]
