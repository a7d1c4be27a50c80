from datetime import date
from sqlalchemy import Column, Date, Integer, Numeric, String, Text
from jobboard.core.database import Base


class Job(Base):
    """
    Job model representing a single job posting on the board.

    Salary is an hourly rate. posted_date is set once at creation and never
    changed by updates.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    employer = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False, index=True)
    salary = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    description = Column(Text, nullable=True, default="")
    posted_date = Column(Date, nullable=False, default=date.today, index=True)

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', employer='{self.employer}')>"
