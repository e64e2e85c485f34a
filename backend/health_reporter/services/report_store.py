import logging
import uuid
from datetime import datetime, timezone
from typing import Callable
from sqlalchemy import delete, select, update
from health_reporter.auth import utcnow
from health_reporter.database import Database
from health_reporter.exceptions import AlreadyPushed, Conflict, NotFound, ValidationError
from health_reporter.models.report import Report, ReportStatus

logger = logging.getLogger(__name__)


def _require_text(value: str, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()


class ReportStore:
    """
    Persistence for reports. Every read and write is scoped to the owning
    subject; a report owned by someone else behaves exactly like a missing one.

    Status changes are single conditional UPDATEs so concurrent writers cannot
    both move a report out of LOCAL.
    """

    def __init__(self, db: Database, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self._clock = clock

    async def create(self, subject_id: str, patient_name: str, diagnosis: str) -> Report:
        report = Report(
            id=str(uuid.uuid4()),
            patient_name=_require_text(patient_name, "patient_name"),
            diagnosis=_require_text(diagnosis, "diagnosis"),
            created_by=subject_id,
            status=ReportStatus.LOCAL.value,
            national_id=None,
            created_at=self._clock().astimezone(timezone.utc),
        )
        async with self.db.session() as session:
            async with session.begin():
                session.add(report)
        return report

    async def get(self, subject_id: str, report_id: str) -> Report:
        async with self.db.session() as session:
            report = await self._load(session, subject_id, report_id)
        if report is None:
            raise NotFound()
        return report

    async def list(self, subject_id: str) -> list[Report]:
        async with self.db.session() as session:
            result = await session.execute(
                select(Report)
                .where(Report.created_by == subject_id)
                .order_by(Report.created_at.desc(), Report.id)
            )
            return list(result.scalars().all())

    async def update(self, subject_id: str, report_id: str, patient_name: str, diagnosis: str) -> Report:
        values = {
            "patient_name": _require_text(patient_name, "patient_name"),
            "diagnosis": _require_text(diagnosis, "diagnosis"),
        }
        async with self.db.session() as session:
            async with session.begin():
                result = await session.execute(
                    update(Report)
                    .where(
                        Report.id == report_id,
                        Report.created_by == subject_id,
                        Report.status == ReportStatus.LOCAL.value,
                    )
                    .values(**values)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    if await self._load(session, subject_id, report_id) is None:
                        raise NotFound()
                    raise Conflict()
                return await self._load(session, subject_id, report_id)

    async def delete(self, subject_id: str, report_id: str) -> None:
        async with self.db.session() as session:
            async with session.begin():
                result = await session.execute(
                    delete(Report)
                    .where(Report.id == report_id, Report.created_by == subject_id)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    raise NotFound()

    async def mark_pushed(self, subject_id: str, report_id: str, national_id: str) -> Report:
        """
        Move a LOCAL report to PUSHED with its national id.

        Only the writer whose UPDATE matches a LOCAL row wins; everyone else
        gets AlreadyPushed (or NotFound if the report is gone).
        """
        async with self.db.session() as session:
            async with session.begin():
                result = await session.execute(
                    update(Report)
                    .where(
                        Report.id == report_id,
                        Report.created_by == subject_id,
                        Report.status == ReportStatus.LOCAL.value,
                        Report.national_id.is_(None),
                    )
                    .values(status=ReportStatus.PUSHED.value, national_id=national_id)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    if await self._load(session, subject_id, report_id) is None:
                        raise NotFound()
                    raise AlreadyPushed()
                return await self._load(session, subject_id, report_id)

    async def _load(self, session, subject_id: str, report_id: str):
        result = await session.execute(
            select(Report)
            .where(Report.id == report_id, Report.created_by == subject_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
