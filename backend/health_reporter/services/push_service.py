"""
Push orchestration: the LOCAL -> PUSHED transition.

    LOCAL --push--> PUSHED (terminal)

A push loads the caller's report, refuses anything not LOCAL, submits it to the
national registry and then records the national id with a conditional write.
Registry failures leave the report LOCAL so it can be pushed again later.

There is no pending marker between the registry call and the local write: if
the write fails after the registry accepted the report, the two disagree. That
case is logged with the national id for manual reconciliation.
"""

import logging
from health_reporter.exceptions import AlreadyPushed, HealthReporterError
from health_reporter.models.report import Report, ReportStatus
from health_reporter.services.registry_client import RegistryClient
from health_reporter.services.report_store import ReportStore

logger = logging.getLogger(__name__)


class PushOrchestrator:
    def __init__(self, store: ReportStore, registry: RegistryClient):
        self.store = store
        self.registry = registry

    async def push(self, subject_id: str, report_id: str) -> Report:
        report = await self.store.get(subject_id, report_id)
        if report.status != ReportStatus.LOCAL.value:
            raise AlreadyPushed()

        national_id = await self.registry.submit(report.patient_name, report.diagnosis)

        try:
            pushed = await self.store.mark_pushed(subject_id, report_id, national_id)
        except AlreadyPushed:
            logger.warning(
                "Report %s was pushed concurrently; registry id %s from this attempt is unused",
                report_id,
                national_id,
            )
            raise
        except HealthReporterError:
            raise
        except Exception:
            logger.error(
                "Registry accepted report %s as %s but the local update failed; store still says LOCAL",
                report_id,
                national_id,
            )
            raise

        logger.info("Report %s pushed as %s", report_id, national_id)
        return pushed
