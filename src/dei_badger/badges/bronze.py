"""Bronze badge issuance.

Records the badged DEI.md revision and congratulates the repository owner.
"""

from typing import Optional
from ..config import get_settings
from ..log import get_logger
from ..notify.mailer import mailer
from ..schemas.badge import BadgeRecord
from ..store.repo import Repo

logger = get_logger("bronze_badge")

def issue_bronze_badge(
    user_id: str,
    name: Optional[str],
    email: str,
    github_repo_id: Optional[int],
    gitlab_repo_id: Optional[int],
    url: str,
    content: str,
    revision: str,
) -> BadgeRecord:
    """
    Persist the badge at `revision` and mail the user about it.
    Exactly one of github_repo_id / gitlab_repo_id must be given.
    """
    if (github_repo_id is None) == (gitlab_repo_id is None):
        raise ValueError("Exactly one of github_repo_id and gitlab_repo_id is required")

    settings = get_settings()
    tier = settings.BADGE_TIER
    if github_repo_id is not None:
        provider, repo_id = "github", github_repo_id
    else:
        provider, repo_id = "gitlab", gitlab_repo_id

    created = Repo.upsert_badge(provider, repo_id, user_id, url, revision, badge_tier=tier)
    logger.info(f"{'Issued' if created else 'Re-issued'} {tier} badge for {url} ({len(content)} chars of DEI.md)")

    if created:
        body = f"{url} has been awarded the {tier} badge for its DEI.md file."
    else:
        body = f"The DEI.md file of {url} changed; its {tier} badge was renewed."
    mailer.send(email, name, tier, url, settings.BRONZE_BADGE_URL, body)

    return Repo.find_badge(provider, repo_id)
