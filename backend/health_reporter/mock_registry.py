"""
Mock National Registry

Stands in for the external national registry during local runs and tests.
Accepts report submissions and hands back a national identifier.

Run with: uvicorn health_reporter.mock_registry:app --port 5020
"""

import random
from fastapi import FastAPI
from pydantic import BaseModel, Field

app = FastAPI(title="Mock National Registry")


class SubmissionRequest(BaseModel):
    patientName: str = Field(min_length=1)
    diagnosis: str = Field(min_length=1)


@app.get("/health")
def health():
    return {"status": "healthy", "server": "national-registry", "mode": "mock"}


@app.post("/submit")
def submit(req: SubmissionRequest):
    """Register a report and return its national identifier."""
    national_id = f"NAT-{random.randint(0, 999999):06d}"
    return {"nationalId": national_id}
