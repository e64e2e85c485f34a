from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional


class ReportInput(BaseModel):
    """Body of POST /reports and PUT /reports/{id}. Accepts camelCase or snake_case."""

    patient_name: str = Field(alias="patientName", min_length=1, max_length=200)
    diagnosis: str = Field(min_length=1)

    @field_validator("patient_name", "diagnosis")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    class Config:
        populate_by_name = True


class ReportResponse(BaseModel):
    id: str
    patient_name: str
    diagnosis: str
    created_by: str
    status: str
    national_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
