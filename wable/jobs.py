"""Job listing sync: one directory per job with its index and stage pipeline."""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .api import WorkableAPI
from .logger import get_logger
from .render import render_stages
from .storage import (
    JOB_INDEX_FILE,
    STAGES_JSON_FILE,
    STAGES_MD_FILE,
    ensure_dir,
    job_dir,
    write_json,
    write_text,
)

logger = get_logger()

JOB_WORKERS = 8


class JobManager:
    def __init__(self, workable_api: WorkableAPI, max_workers: int = JOB_WORKERS):
        self.workable_api = workable_api
        self.max_workers = max_workers

    def process_job(self, job: Dict[str, Any], base_dir: Optional[Union[str, Path]] = None) -> None:
        """Write the job index, then fetch and write its stages.

        A failed stage fetch is logged and leaves the job index in place.
        """
        title = job.get("title", job.get("shortcode"))
        logger.info(f"Processing job: {title} ({job['shortcode']})")

        directory = ensure_dir(job_dir(base_dir, job["shortcode"]))
        write_json(directory / JOB_INDEX_FILE, job)

        try:
            stages_response = self.workable_api.get_job_stages(job["shortcode"])
            stages = stages_response.get("stages") or []
            write_json(directory / STAGES_JSON_FILE, stages_response)
            write_text(directory / STAGES_MD_FILE, render_stages(stages, title, job["shortcode"]))
            logger.info(f"  Processed {len(stages)} stages for {title}")
        except Exception as e:
            logger.error(f"  Failed to process stages for {title}: {e}")
            logger.record_error(type(e).__name__)

        logger.record("jobs_processed")

    def process_all_jobs(
        self,
        base_dir: Optional[Union[str, Path]] = None,
        updated_after: Optional[str] = None,
    ) -> int:
        """Fetch every job and process them concurrently. Returns the job count.

        Listing errors propagate; so do errors writing a job index.
        """
        logger.info("Fetching all jobs...")
        jobs = self.workable_api.list_jobs(updated_after)

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="wable-job") as executor:
            futures = [executor.submit(self.process_job, job, base_dir) for job in jobs]
            for future in futures:
                future.result()

        logger.info(f"Processed {len(jobs)} jobs")
        return len(jobs)
