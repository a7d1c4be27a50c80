from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional, Union
from datetime import date
from enum import Enum


# Largest value the Numeric(10, 2) salary column holds
MAX_SALARY = 99999999.99


class SortKey(str, Enum):
    """Orderings offered by the job search"""
    DATE = "date"
    SALARY_HIGH = "salary-high"
    SALARY_LOW = "salary-low"
    TITLE = "title"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortKey":
        """Resolve a raw sort key, falling back to DATE for unknown values"""
        try:
            return cls(value)
        except ValueError:
            return cls.DATE


class SalaryBand(str, Enum):
    """Coarse pay level shown next to a listing"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1, max_length=255)
    employer: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    salary: float = Field(..., ge=0, le=MAX_SALARY, allow_inf_nan=False, description="Hourly rate")
    description: Optional[str] = ""

    @field_validator("title", "employer", "location")
    @classmethod
    def not_blank(cls, v: str) -> str:
        """Reject whitespace-only values for required text fields"""
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v: Optional[str]) -> str:
        return "" if v is None else v


class JobUpdateRequest(JobCreateRequest):
    """Schema for replacing a job's editable fields (posted_date is never updated)"""
    pass


class JobResponse(BaseModel):
    """Schema for job response"""
    id: int
    title: str
    employer: str
    location: str
    salary: float
    description: Optional[str] = ""
    posted_date: date

    class Config:
        from_attributes = True  # Allows conversion from SQLAlchemy models


class JobListingResponse(JobResponse):
    """Job as shown in search results, with display hints"""
    posted_ago: str
    salary_band: SalaryBand


class JobCreateResponse(BaseModel):
    """Schema for job creation response"""
    id: int
    message: str


class JobMessageResponse(BaseModel):
    """Confirmation for update and delete"""
    message: str


class JobSearchCriteria(BaseModel):
    """
    Filter and sort criteria for the job search.

    Salary bounds are kept raw: a bound that does not parse as a number is
    ignored rather than rejected. Unknown sort keys fall back to newest first.
    """
    search: Optional[str] = None
    location: Optional[str] = None
    salary_min: Optional[Union[float, str]] = None
    salary_max: Optional[Union[float, str]] = None
    sort_by: str = SortKey.DATE.value

    @property
    def sort_key(self) -> SortKey:
        return SortKey.parse(self.sort_by)

    @property
    def active_filter_count(self) -> int:
        """Number of filters the user has filled in (sort order excluded)"""
        values = [self.search, self.location, self.salary_min, self.salary_max]
        return len([v for v in values if v not in (None, "")])


class JobSuggestion(BaseModel):
    """Autocomplete entry for the search box"""
    id: int
    title: str
    employer: str


class LocationAverage(BaseModel):
    """Mean valid salary for one location"""
    location: str
    average: float


class JobAnalytics(BaseModel):
    """
    Aggregate view over a job collection.

    Only jobs with a valid salary (finite, non-negative) contribute to
    average_salary, salary_distribution and average_salary_by_location.
    postings_by_day always has 30 entries aligned with trend_dates, oldest first.
    """
    reference_date: date
    total_jobs: int
    average_salary: float
    salary_distribution: Dict[str, int]
    job_count_by_location: Dict[str, int]
    average_salary_by_location: List[LocationAverage]
    postings_by_day: List[int]
    trend_dates: List[date]
    location_count: int
    recent_jobs: int
