"""
models/job.py
-------------
Domain model for job postings.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Job:
    """
    Represents a job offered by a company.

    Attributes:
        id: Database primary key (None for new records).
        title: Job title.
        salary: Yearly salary, if published.
        equity: Fraction of the company offered, between 0 and 1.
        company_handle: Handle of the company offering the job.
    """
    title: str
    company_handle: str
    salary: Optional[int] = None
    equity: Optional[float] = None
    id: Optional[int] = None

    def has_equity(self) -> bool:
        """Returns True if the job comes with a non-zero equity stake."""
        return bool(self.equity)

    def __str__(self) -> str:
        salary = f"{self.salary}" if self.salary is not None else "n/a"
        return f"#{self.id} {self.title} @ {self.company_handle} | salary {salary}"
