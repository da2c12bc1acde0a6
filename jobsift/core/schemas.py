"""Core data models for the job search pipeline."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from jobsift.core.config import SearchParams

SALARY_NOT_SPECIFIED = "Not specified"


class NormalizedJob(BaseModel):
    """Canonical job record produced by the normalizer.

    Frozen. Detail enrichment replaces the instance via ``model_copy``.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    position: str = ""
    company: str = ""
    location: str = ""
    date: str = ""
    salary: str = SALARY_NOT_SPECIFIED
    job_url: str = ""
    company_url: str = ""
    company_logo: str = ""
    description: str = ""


class ClassifiedJob(BaseModel):
    """Wrapper that pairs a NormalizedJob with its identity and classification."""

    model_config = ConfigDict(frozen=True)

    job: NormalizedJob
    job_id: str
    is_remote: bool = False
    is_contract: bool = False

    def to_response(self, snippet_length: int) -> dict[str, Any]:
        j = self.job
        return {
            "jobId": self.job_id,
            "position": j.position,
            "company": j.company,
            "location": j.location,
            "date": j.date,
            "salary": j.salary,
            "jobUrl": j.job_url,
            "companyUrl": j.company_url,
            "companyLogo": j.company_logo,
            "descriptionSnippet": j.description[:snippet_length],
            "isRemote": self.is_remote,
            "isContract": self.is_contract,
        }


class SearchResult(BaseModel):
    """Outcome of one search request."""

    total_fetched: int = Field(ge=0)
    total_matched_after_filters: int = Field(ge=0)
    returned: int = Field(ge=0)
    params: SearchParams
    jobs: list[ClassifiedJob] = Field(default_factory=list)

    def to_response(self, snippet_length: int) -> dict[str, Any]:
        return {
            "totalFetched": self.total_fetched,
            "totalMatchedAfterFilters": self.total_matched_after_filters,
            "returned": self.returned,
            "params": self.params.model_dump(by_alias=True),
            "jobs": [j.to_response(snippet_length) for j in self.jobs],
        }


class ErrorBody(BaseModel):
    """Error payload returned instead of a SearchResult."""

    error: str
    detail: str = ""
