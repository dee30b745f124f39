"""Repository pattern for badge records.

Looks up and upserts the revision a repository was last badged at.
Records are keyed by the provider-specific repository id.
"""

from typing import Optional
from .db import get_db_connection
from ..schemas.badge import BadgeRecord
import logging

logger = logging.getLogger("dei_badger.store")

# provider name -> id column; never interpolate anything else into SQL
PROVIDER_COLUMNS = {
    "github": "github_repo_id",
    "gitlab": "gitlab_repo_id",
}

def _column(provider: str) -> str:
    try:
        return PROVIDER_COLUMNS[provider]
    except KeyError:
        raise ValueError(f"Unsupported provider: {provider}")

class Repo:
    @staticmethod
    def find_badge(provider: str, repo_id: int) -> Optional[BadgeRecord]:
        """Record for this repository, whatever revision it was badged at."""
        column = _column(provider)
        with get_db_connection() as conn:
            row = conn.execute(
                f"SELECT * FROM badged_repos WHERE {column} = ?",
                (repo_id,)
            ).fetchone()
            if not row:
                return None
            return BadgeRecord(**{k: row[k] for k in BadgeRecord.model_fields if k in row.keys()})

    @staticmethod
    def upsert_badge(provider: str, repo_id: int, user_id: Optional[str], url: str, revision: str, badge_tier: str = "Bronze") -> bool:
        """
        Store the badged revision for a repository.
        Returns True if newly inserted, False if an existing record was updated.
        """
        column = _column(provider)
        with get_db_connection() as conn:
            # 1. Existence Check
            existing = conn.execute(
                f"SELECT id FROM badged_repos WHERE {column} = ?",
                (repo_id,)
            ).fetchone()

            # 2. Update in place
            if existing:
                conn.execute(
                    """
                    UPDATE badged_repos
                    SET user_id = ?, url = ?, dei_commit_sha = ?, badge_tier = ?, updated_at = CURRENT_TIMESTAMP
                    WHERE id = ?
                    """,
                    (user_id, url, revision, badge_tier, existing["id"])
                )
                conn.commit()
                return False

            # 3. Insert
            conn.execute(
                f"""
                INSERT INTO badged_repos ({column}, user_id, url, dei_commit_sha, badge_tier)
                VALUES (?, ?, ?, ?, ?)
                """,
                (repo_id, user_id, url, revision, badge_tier)
            )
            conn.commit()
            logger.info(f"Recorded {badge_tier} badge for {url} at {revision}")
            return True
