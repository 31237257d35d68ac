from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from .certificate import CONTENT_TYPE, issue_certificate
from .compliance import verify_submission
from .config import LOG_LEVEL, LOG_FORMAT, LOG_FILE, is_debug, is_production
from .db import (
    init_db, close_connection, insert_submission, get_latest_submission, NotFoundError, StoreError,
)
from .integrity import content_signature
from .logging_config import audit_log, configure_logging, set_request_id
from .models import ErrorBody, Submission, Verdict
from .validation import SERVER_FIELDS, ValidationError, validate_submission, validate_submission_id


def _startup():
    configure_logging(level=LOG_LEVEL, json_format=LOG_FORMAT != "text", log_file=LOG_FILE)
    init_db()


@asynccontextmanager
async def lifespan(app: FastAPI):
    _startup()
    yield
    close_connection()


app = FastAPI(
    title="AEGIS Compliance Inspector",
    lifespan=lifespan,
    debug=is_debug(),
    docs_url=None if is_production() else "/docs",
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = set_request_id(request.headers.get("x-request-id"))
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(ValidationError)
def _validation_error(request: Request, exc: ValidationError):
    audit_log.request_rejected(exc.field, exc.message)
    return JSONResponse(status_code=400, content=ErrorBody(message=exc.message, field=exc.field).model_dump())


@app.exception_handler(RequestValidationError)
def _request_validation_error(request: Request, exc: RequestValidationError):
    # only reachable for bodies that are not JSON at all
    errors = exc.errors()
    message = errors[0].get("msg", "invalid request") if errors else "invalid request"
    audit_log.request_rejected("body", message)
    return JSONResponse(status_code=400, content=ErrorBody(message=message, field="body").model_dump())


@app.exception_handler(NotFoundError)
def _not_found(request: Request, exc: NotFoundError):
    audit_log.lookup_miss(exc.submission_id, request.url.path)
    return JSONResponse(status_code=404, content=ErrorBody(message=exc.message).model_dump(exclude_none=True))


@app.exception_handler(StoreError)
def _store_error(request: Request, exc: StoreError):
    audit_log.store_failure(exc.operation, exc.__cause__ or exc)
    return JSONResponse(status_code=500, content=ErrorBody(message="Internal server error").model_dump(exclude_none=True))


# --- Lab API ---

@app.post("/api/lab/submit", status_code=201, response_model=Submission)
def submit_lab_data(payload: Any = Body(None)):
    if isinstance(payload, dict):
        ignored = [f for f in SERVER_FIELDS if f in payload]
        audit_log.submission_received(payload.get("labName"), payload.get("modelName"), ignored)
    data = validate_submission(payload)
    signature = content_signature(data)
    submission = insert_submission(data, signature)
    audit_log.submission_stored(submission.id, submission.signature)
    return submission


@app.get("/api/lab/latest", response_model=Optional[Submission])
def latest_submission():
    return get_latest_submission()


# --- Inspection API ---

@app.post("/api/inspection/verify", response_model=Verdict)
def verify(payload: Any = Body(None)):
    if not isinstance(payload, dict):
        raise ValidationError("body", "must be an object")
    submission_id = validate_submission_id(payload.get("submissionId"))
    verdict = verify_submission(submission_id)
    audit_log.verification_decision(submission_id, verdict.compliant, verdict.status, verdict.proofHash)
    return verdict


@app.get("/api/inspection/report/{submission_id}")
def generate_report(submission_id: str):
    try:
        sid = int(submission_id)
    except ValueError:
        # a non-numeric id cannot resolve to a record
        raise NotFoundError(submission_id) from None
    filename, pdf = issue_certificate(sid)
    audit_log.report_generated(sid, len(pdf))
    return Response(
        content=pdf,
        media_type=CONTENT_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
