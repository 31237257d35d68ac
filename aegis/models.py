from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Submission(BaseModel):
    id: int
    labName: str
    modelName: str
    compute: float
    cbrnSafeguards: bool = False
    signature: str
    createdAt: datetime


class VerdictDetails(BaseModel):
    computeCheck: bool
    cbrnCheck: bool


class Verdict(BaseModel):
    compliant: bool
    status: str
    proofHash: str
    timestamp: str
    details: VerdictDetails


class ErrorBody(BaseModel):
    message: str
    field: Optional[str] = None
