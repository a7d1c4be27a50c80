import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobboard.core.database import get_db
from jobboard.crud import job as job_crud
from jobboard.schemas.job import (
    JobAnalytics,
    JobCreateRequest,
    JobCreateResponse,
    JobListingResponse,
    JobMessageResponse,
    JobResponse,
    JobSearchCriteria,
    JobSuggestion,
    JobUpdateRequest,
)
from jobboard.services import job_query

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


def _snapshot(db: Session) -> List[dict]:
    """Plain-dict copy of every stored job, newest first."""
    return [JobResponse.model_validate(job).model_dump() for job in job_crud.get_all(db)]


@router.get("/", response_model=list[JobResponse])
def list_jobs(db: Session = Depends(get_db)):
    """
    List every job, most recently posted first.
    """
    return job_crud.get_all(db)


@router.post("/", status_code=201, response_model=JobCreateResponse)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Create a new job posting.

    title, employer, location and salary are required; salary may be sent as
    a number or a numeric string. The posting date is set to today.
    """
    try:
        new_job = job_crud.create(db, request)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating job: {e}")
        raise HTTPException(status_code=500, detail="Failed to create job")

    logger.info(f"Created job {new_job.id}: {new_job.title} at {new_job.employer}")
    return JobCreateResponse(id=new_job.id, message="Job created successfully")


@router.get("/search", response_model=list[JobListingResponse])
def search_jobs(
    search: Optional[str] = None,
    location: Optional[str] = None,
    salary_min: Optional[str] = None,
    salary_max: Optional[str] = None,
    sort_by: str = "date",
    db: Session = Depends(get_db)
):
    """
    Filter and sort the job board.

    Args:
        search: Case-insensitive text matched against title, employer and description
        location: Exact location match
        salary_min: Lowest hourly rate (ignored if not a number)
        salary_max: Highest hourly rate (ignored if not a number)
        sort_by: date (default), salary-high, salary-low or title
    """
    criteria = JobSearchCriteria(
        search=search,
        location=location,
        salary_min=salary_min,
        salary_max=salary_max,
        sort_by=sort_by
    )
    today = date.today()
    results = job_query.filter_and_sort(_snapshot(db), criteria)

    logger.info(f"Search with {criteria.active_filter_count} active filters matched {len(results)} jobs")

    return [
        JobListingResponse(
            **job,
            posted_ago=job_query.posted_ago(job["posted_date"], today),
            salary_band=job_query.salary_band(job["salary"])
        )
        for job in results
    ]


@router.get("/analytics", response_model=JobAnalytics)
def job_analytics(db: Session = Depends(get_db)):
    """
    Market analytics over all jobs: salary distribution, per-location counts
    and averages, and the 30-day posting trend ending today.
    """
    return job_query.compute_analytics(_snapshot(db), today=date.today())


@router.get("/suggestions", response_model=list[JobSuggestion])
def job_suggestions(
    q: str = "",
    limit: int = Query(job_query.SUGGESTION_LIMIT, ge=1, le=20),
    db: Session = Depends(get_db)
):
    """
    Autocomplete for the search box: jobs whose title or employer contains q.
    """
    return job_query.search_suggestions(_snapshot(db), q, limit=limit)


@router.get("/locations", response_model=list[str])
def job_locations(db: Session = Depends(get_db)):
    """
    Distinct locations for the location filter, in order of appearance.
    """
    return job_query.distinct_locations(_snapshot(db))


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID.
    """
    job = job_crud.get_by_id(db, job_id)

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return job


@router.put("/{job_id}", response_model=JobMessageResponse)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Replace a job's title, employer, location, salary and description.
    The original posting date is kept.
    """
    try:
        updated = job_crud.update(db, job_id, request)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating job {job_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update job")

    if not updated:
        raise HTTPException(status_code=404, detail="Job not found")

    logger.info(f"Updated job {job_id}")
    return JobMessageResponse(message="Job updated successfully")


@router.delete("/{job_id}", response_model=JobMessageResponse)
def delete_job(job_id: int, db: Session = Depends(get_db)):
    """
    Delete a job by ID.
    """
    try:
        deleted = job_crud.delete(db, job_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting job {job_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete job")

    if not deleted:
        raise HTTPException(status_code=404, detail="Job not found")

    logger.info(f"Deleted job {job_id}")
    return JobMessageResponse(message="Job deleted successfully")
