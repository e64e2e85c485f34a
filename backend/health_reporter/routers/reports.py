from fastapi import APIRouter, Depends
from health_reporter.auth import get_current_subject
from health_reporter.dependencies import get_push_orchestrator, get_report_store
from health_reporter.schemas.report import ReportInput, ReportResponse
from health_reporter.services.push_service import PushOrchestrator
from health_reporter.services.report_store import ReportStore

router = APIRouter()


@router.get("", response_model=list[ReportResponse])
async def list_reports(
    subject_id: str = Depends(get_current_subject),
    store: ReportStore = Depends(get_report_store),
):
    reports = await store.list(subject_id)
    return [ReportResponse.model_validate(r) for r in reports]


@router.post("", response_model=ReportResponse, status_code=201)
async def create_report(
    data: ReportInput,
    subject_id: str = Depends(get_current_subject),
    store: ReportStore = Depends(get_report_store),
):
    report = await store.create(subject_id, data.patient_name, data.diagnosis)
    return ReportResponse.model_validate(report)


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: str,
    subject_id: str = Depends(get_current_subject),
    store: ReportStore = Depends(get_report_store),
):
    report = await store.get(subject_id, report_id)
    return ReportResponse.model_validate(report)


@router.put("/{report_id}", response_model=ReportResponse)
async def update_report(
    report_id: str,
    data: ReportInput,
    subject_id: str = Depends(get_current_subject),
    store: ReportStore = Depends(get_report_store),
):
    report = await store.update(subject_id, report_id, data.patient_name, data.diagnosis)
    return ReportResponse.model_validate(report)


@router.delete("/{report_id}")
async def delete_report(
    report_id: str,
    subject_id: str = Depends(get_current_subject),
    store: ReportStore = Depends(get_report_store),
):
    await store.delete(subject_id, report_id)
    return {"deleted": True, "report_id": report_id}


@router.post("/{report_id}/push", response_model=ReportResponse)
async def push_report(
    report_id: str,
    subject_id: str = Depends(get_current_subject),
    pusher: PushOrchestrator = Depends(get_push_orchestrator),
):
    """Submit a LOCAL report to the national registry. Allowed once per report."""
    report = await pusher.push(subject_id, report_id)
    return ReportResponse.model_validate(report)
