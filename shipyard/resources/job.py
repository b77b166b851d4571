import logging
from typing import Dict
from shipyard.resources.base import BaseResource
from shipyard.resources.cronjob import CronJobResource, job_from_cronjob

logger = logging.getLogger(__name__)


class JobResource(BaseResource):
    """One-time Job, or a manual run of a CronJob."""

    KIND = "Job"

    def launch(self, cronjobs: CronJobResource, cronjob_name: str, namespace: str, name: str) -> Dict:
        """Start a Job from the named CronJob right away."""
        cronjob = cronjobs.fetch(cronjob_name, namespace)
        job = job_from_cronjob(cronjob, namespace, name)
        logger.info(f"Launching Job {namespace}/{name} from CronJob {cronjob_name}")
        return self.create(namespace, job)
