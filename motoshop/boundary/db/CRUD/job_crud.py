"""
Job CRUD operations.

Provides Create, Read, Update, Delete operations for JobModel.

Dependencies: sqlalchemy, motoshop.boundary.db.models
System role: Job persistence operations
"""

from motoshop.boundary.db.CRUD.base_crud import BaseCRUD
from motoshop.boundary.db.models.job_model import JobModel


class JobCRUD(BaseCRUD[JobModel]):
    """CRUD operations for JobModel."""

    def __init__(self) -> None:
        """Initialize JobCRUD with JobModel."""
        super().__init__(JobModel)


job_crud = JobCRUD()
