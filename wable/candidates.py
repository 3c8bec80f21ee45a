"""
Incremental candidate sync.

Candidates are streamed page by page. Each one whose remote updated_at is
newer than the stored baseline gets its baseline rewritten right away and a
detail task queued on a thread pool; the pool is joined once paging ends.
"""

from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .api import WorkableAPI
from .freshness import should_update
from .logger import get_logger
from .quarantine import relocate_flagged
from .render import render_profile
from .storage import (
    COVER_FILE,
    INDEX_FILE,
    PROFILE_FILE,
    RESUME_FILE,
    SHOW_FILE,
    candidate_dir,
    ensure_dir,
    write_bytes,
    write_json,
    write_text,
)

logger = get_logger()

DETAIL_WORKERS = 16


class CandidateManager:
    def __init__(self, workable_api: WorkableAPI, max_workers: int = DETAIL_WORKERS):
        self.workable_api = workable_api
        self.max_workers = max_workers

    def download_candidates(
        self,
        job_shortcode: str,
        base_dir: Optional[Union[str, Path]] = None,
        updated_after: Optional[str] = None,
    ) -> int:
        """
        Mirror a job's candidates into <base_dir>/candidates.

        Args:
            job_shortcode: Job whose candidates are synced
            base_dir: Output root (default: current directory)
            updated_after: Optional ISO timestamp passed to the API filter

        Returns:
            Number of candidates seen on the remote side
        """
        logger.info(f"Downloading candidates for job: {job_shortcode}")

        total = 0
        detail_jobs: List[Future] = []

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="wable-detail") as executor:
            for candidates in self.workable_api.generate_candidates(job_shortcode, updated_after):
                for candidate in candidates:
                    total += 1
                    logger.record("candidates_seen")
                    record_dir = ensure_dir(candidate_dir(base_dir, candidate))

                    if not should_update(candidate, record_dir):
                        logger.info(f"Skipping candidate (up to date): {_label(candidate)}")
                        logger.record("candidates_skipped")
                        continue

                    logger.info(f"Updating candidate: {_label(candidate)}")
                    logger.record("candidates_updated")
                    # baseline goes first so an interrupted run does not refetch forever
                    write_json(record_dir / INDEX_FILE, candidate)
                    detail_jobs.append(executor.submit(self.process_candidate_details, candidate, record_dir))

            logger.info(f"Processing details for {len(detail_jobs)} candidates...")
            wait(detail_jobs)

        logger.info(f"Processed {total} candidates")
        return total

    def process_candidate_details(self, candidate: Dict[str, Any], record_dir: Path) -> bool:
        """Fetch and store the detail snapshot and its derived files.

        Returns False when the detail fetch itself failed. Failures of single
        derived files are logged and do not stop the others.
        """
        label = _label(candidate)
        try:
            logger.info(f"Processing details for {label}")
            detail = self.workable_api.get_candidate_by_id(candidate["id"])
            write_json(record_dir / SHOW_FILE, detail)
        except Exception as e:
            logger.error(f"  Failed to process details for {label}: {e}")
            logger.record_error(type(e).__name__)
            return False

        try:
            write_text(record_dir / PROFILE_FILE, render_profile(detail))
            logger.info(f"  Generated profile for {label}")
        except Exception as e:
            self._artifact_failed("profile", label, e)

        if detail.get("resume_url"):
            try:
                write_bytes(record_dir / RESUME_FILE, self.workable_api.download_file(detail["resume_url"]))
                logger.info(f"  Downloaded resume for {label}")
            except Exception as e:
                self._artifact_failed("resume", label, e)

        if detail.get("cover_letter"):
            try:
                write_text(record_dir / COVER_FILE, detail["cover_letter"])
                logger.info(f"  Saved cover letter for {label}")
            except Exception as e:
                self._artifact_failed("cover letter", label, e)

        return True

    def _artifact_failed(self, artifact: str, label: str, error: Exception) -> None:
        logger.warning(f"  Failed to save {artifact} for {label}: {error}")
        logger.record("artifacts_failed")
        logger.record_error(type(error).__name__)

    def move_disqualified_candidates(self, base_dir: Union[str, Path], move_to_dir: Union[str, Path]) -> int:
        return relocate_flagged(base_dir, move_to_dir)


def _label(candidate: Dict[str, Any]) -> str:
    return candidate.get("email") or str(candidate.get("id"))
