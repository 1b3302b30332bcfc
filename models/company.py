"""
models/company.py
-----------------
Domain model for companies.
"""

from dataclasses import dataclass, field
from typing import Optional

from models.job import Job


@dataclass
class Company:
    """
    Represents a company that posts jobs.

    Attributes:
        handle: Short lowercase identifier, also the primary key.
        name: Display name (unique).
        description: Free-text description.
        num_employees: Headcount, if known.
        logo_url: URL of the company logo, if any.
        jobs: The company's jobs; only loaded when fetching a single company.
    """
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None
    jobs: list[Job] = field(default_factory=list)

    def __str__(self) -> str:
        size = f"{self.num_employees} employees" if self.num_employees is not None else "size unknown"
        return f"{self.name} ({self.handle}) | {size}"
