"""Repository scan and badge decision.

For each repository: resolve it, fetch the tracked file, compare the file
revision with the stored badge record and hand badge-worthy repositories to
the issuer. Skipped repositories are collected and mailed in one message.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_futures
from functools import partial
from typing import Callable, Iterable, List, Optional, Set, Tuple, Union

from ..badges.bronze import issue_bronze_badge
from ..config import get_settings
from ..notify.mailer import Mailer, mailer as default_mailer
from ..providers import ProviderAdapter, get_provider
from ..schemas.provider import FileSnapshot, RepositoryInfo
from ..store.repo import Repo

logger = logging.getLogger("dei_badger.scan")

def _log_issuance_outcome(url: str, future: Future):
    if future.cancelled():
        logger.warning(f"Badge issuance for {url} was cancelled")
        return
    error = future.exception()
    if error is not None:
        logger.error(f"Badge issuance for {url} failed: {error}")

class RepositoryScanner:
    def __init__(
        self,
        provider: ProviderAdapter,
        store=Repo,
        issuer: Callable = issue_bronze_badge,
        mailer: Optional[Mailer] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        tracked_file: Optional[str] = None,
        badge_tier: Optional[str] = None,
    ):
        settings = get_settings()
        self.provider = provider
        self.store = store
        self.issuer = issuer
        self.mailer = mailer or default_mailer
        self._owns_executor = executor is None
        # Single worker: issuances for one user run in submission order
        self.executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="badge-issuer")
        self.tracked_file = tracked_file or settings.TRACKED_FILE
        self.badge_tier = badge_tier or settings.BADGE_TIER
        self.issuances: List[Future] = []

    def __enter__(self) -> "RepositoryScanner":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def scan_repositories(self, user_id: str, name: Optional[str], email: str, repository_ids: Iterable[Union[int, str]]) -> List[str]:
        """
        Scan repositories in order and trigger badge issuance where due.
        Returns one message per skipped repository. Never raises.
        """
        results: List[str] = []
        # (repository id, revision) pairs already handed to the issuer in this scan
        submitted: Set[Tuple[Union[int, str], str]] = set()
        try:
            for repository_id in repository_ids:
                try:
                    self._scan_repository(user_id, name, email, repository_id, results, submitted)
                except Exception:
                    logger.exception(f"Unexpected error scanning repository {repository_id}")

            # The issuer mails each badged repository itself
            if results:
                self.mailer.send(email, name, self.badge_tier, None, None, "\n".join(results))
        except Exception:
            logger.exception("Scan error")

        return results

    def _scan_repository(self, user_id, name, email, repository_id, results: List[str], submitted: Set[Tuple[Union[int, str], str]]):
        # 1. Resolve repository
        info_result = self.provider.fetch_repository_info(repository_id)
        if not info_result.ok:
            logger.error(f"Skipping repository {repository_id}: {info_result.errors}")
            return
        info = info_result.result

        # 2. Tracked file on the default branch
        file_result = self.provider.fetch_file_snapshot(info.locator, self.tracked_file, info.default_branch)
        if not file_result.ok:
            results.append(f"{info.url} does not have a {self.tracked_file} file")
            return
        file = file_result.result

        # 3. Previous badge, by repository id only so a changed file is re-badged
        try:
            existing = self.store.find_badge(self.provider.name, info.id)
        except Exception as e:
            logger.error(f"Badge lookup failed for {info.url}: {e}")
            return

        # 4. Decide
        if not file.content:
            logger.info(f"{info.url} has an empty {self.tracked_file}, skipping")
            return

        if existing is None:
            logger.info(f"{info.url} was never badged, issuing at {file.revision}")
        elif existing.dei_commit_sha != file.revision:
            logger.info(f"{info.url} changed since {existing.dei_commit_sha}, re-issuing at {file.revision}")
        else:
            results.append(f"{info.url} was already badged")
            return

        # Repeated id in one scan: the first issuance may not be stored yet
        key = (info.id, file.revision)
        if key in submitted:
            logger.info(f"{info.url} already queued for issuance at {file.revision}, skipping")
            return
        submitted.add(key)

        self._submit_issuance(user_id, name, email, info, file)

    def _submit_issuance(self, user_id, name, email, info: RepositoryInfo, file: FileSnapshot) -> Future:
        github_id = info.id if self.provider.name == "github" else None
        gitlab_id = info.id if self.provider.name == "gitlab" else None
        future = self.executor.submit(
            self.issuer,
            user_id,
            name,
            email,
            github_id,
            gitlab_id,
            info.url,
            file.content,
            file.revision,
        )
        future.add_done_callback(partial(_log_issuance_outcome, info.url))
        self.issuances.append(future)
        return future

    def wait_for_issuances(self, timeout: Optional[float] = None) -> List[Future]:
        """
        Block until pending issuances finish (or timeout).
        Returns the finished futures; unfinished ones stay pending.
        """
        done, not_done = wait_futures(self.issuances, timeout=timeout)
        self.issuances = list(not_done)
        return list(done)

    def close(self, wait: bool = True):
        # Queued issuances still run after a non-waiting shutdown
        if self._owns_executor:
            self.executor.shutdown(wait=wait)

def scan_repositories(provider_name: str, user_id: str, name: Optional[str], email: str, repository_ids: Iterable[Union[int, str]], wait: bool = False) -> List[str]:
    scanner = RepositoryScanner(get_provider(provider_name))
    try:
        return scanner.scan_repositories(user_id, name, email, repository_ids)
    finally:
        scanner.close(wait=wait)
