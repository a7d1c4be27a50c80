"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for jobs, providing a clean interface for the API layer.
"""

from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from jobboard.models.job import Job
from jobboard.schemas.job import JobCreateRequest, JobUpdateRequest


def create(db: Session, job_data: JobCreateRequest) -> Job:
    """
    Create a new job in the database.

    The posting date is always assigned here, never taken from the client.

    Args:
        db: Database session
        job_data: Validated job creation data

    Returns:
        Created Job instance with id
    """
    db_job = Job(
        title=job_data.title,
        employer=job_data.employer,
        location=job_data.location,
        salary=job_data.salary,
        description=job_data.description or "",
        posted_date=date.today()
    )

    db.add(db_job)
    db.commit()
    db.refresh(db_job)

    return db_job


def get_by_id(db: Session, job_id: int) -> Optional[Job]:
    """
    Retrieve a job by its ID.

    Args:
        db: Database session
        job_id: Job ID to retrieve

    Returns:
        Job instance if found, None otherwise
    """
    return db.query(Job).filter(Job.id == job_id).first()


def get_all(db: Session) -> List[Job]:
    """
    Retrieve every job, most recently posted first.

    Jobs posted on the same day are ordered newest id first.
    """
    return db.query(Job).order_by(Job.posted_date.desc(), Job.id.desc()).all()


def update(db: Session, job_id: int, job_data: JobUpdateRequest) -> Optional[Job]:
    """
    Replace the editable fields of a job.

    Args:
        db: Database session
        job_id: Job ID to update
        job_data: Validated replacement fields

    Returns:
        Updated Job instance if found, None otherwise
    """
    job = get_by_id(db, job_id)
    if not job:
        return None

    job.title = job_data.title
    job.employer = job_data.employer
    job.location = job_data.location
    job.salary = job_data.salary
    job.description = job_data.description or ""

    db.commit()
    db.refresh(job)

    return job


def delete(db: Session, job_id: int) -> bool:
    """
    Delete a job by ID.

    Args:
        db: Database session
        job_id: Job ID to delete

    Returns:
        True if deleted, False if not found
    """
    job = get_by_id(db, job_id)
    if not job:
        return False

    db.delete(job)
    db.commit()

    return True


def count(db: Session) -> int:
    """Total number of jobs on the board."""
    return db.query(Job).count()
