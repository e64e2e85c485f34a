import enum
from sqlalchemy import CheckConstraint, Column, ForeignKey, String, Text
from health_reporter.database import Base, UTCDateTime


class ReportStatus(str, enum.Enum):
    LOCAL = "LOCAL"
    PUSHED = "PUSHED"


class Report(Base):
    __tablename__ = "reports"
    __table_args__ = (
        CheckConstraint("status IN ('LOCAL', 'PUSHED')", name="ck_reports_status"),
        # national_id is set exactly when the report has been pushed
        CheckConstraint(
            "(status = 'PUSHED') = (national_id IS NOT NULL)",
            name="ck_reports_national_id",
        ),
    )

    id = Column(String(36), primary_key=True)
    patient_name = Column(String(200), nullable=False)
    diagnosis = Column(Text, nullable=False)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(10), nullable=False, default=ReportStatus.LOCAL.value)
    national_id = Column(String(64))
    created_at = Column(UTCDateTime(), nullable=False, index=True)
