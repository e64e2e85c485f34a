from health_reporter.models.user import User
from health_reporter.models.report import Report, ReportStatus

__all__ = ["User", "Report", "ReportStatus"]
