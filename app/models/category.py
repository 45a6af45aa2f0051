"""
Category model.

Categories are not stored entities: a label exists for a user while at
least one of their non-purged tasks carries it.
"""

from pydantic import BaseModel


class Category(BaseModel):
    """A category label with the number of tasks currently using it."""

    name: str
    task_count: int = 0
