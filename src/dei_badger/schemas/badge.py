from pydantic import BaseModel
from typing import List, Optional, Union

class BadgeRecord(BaseModel):
    github_repo_id: Optional[int] = None
    gitlab_repo_id: Optional[int] = None
    user_id: Optional[str] = None
    url: str
    dei_commit_sha: str
    badge_tier: str = "Bronze"
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

class ScanRequest(BaseModel):
    user_id: str
    name: str
    email: str
    repository_ids: List[Union[int, str]] = []
