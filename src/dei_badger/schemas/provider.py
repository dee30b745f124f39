"""Pydantic schemas for provider adapter results.

Defines UserInfo, RepositorySummary, RepositoryInfo, FileSnapshot and the
ProviderResult envelope every adapter fetch returns.
"""

from pydantic import BaseModel
from typing import TypeVar, Generic, List, Optional, Union

T = TypeVar("T")

class UserInfo(BaseModel):
    login: str
    name: Optional[str] = None
    email: Optional[str] = None
    id: int

class RepositorySummary(BaseModel):
    id: int
    full_name: str

class RepositoryInfo(BaseModel):
    id: int
    url: str
    default_branch: Optional[str] = None
    full_name: Optional[str] = None
    locator: Union[int, str] # what fetch_file_snapshot accepts for this provider

class FileSnapshot(BaseModel):
    revision: str
    content: str

class ProviderResult(BaseModel, Generic[T]):
    result: Optional[T] = None
    errors: List[str] = []

    @property
    def ok(self) -> bool:
        return not self.errors
