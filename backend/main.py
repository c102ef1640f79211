import os
import sys

# Ensure local backend modules are imported even if uvicorn is started from another cwd.
BACKEND_DIR = os.path.dirname(os.path.abspath(__file__))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, ValidationError

import scoring as scoring_module
from eye_health_score import calculate_eye_health_score
from logger import get_logger
from models import CalculatorInfo, EyeHealthInput, EyeHealthResponse, ReportRequest
from normalizer import normalize
from pdf_report import render_report_bytes
from registry import CALCULATORS, list_calculators
from scoring import InvalidMeasurementError

logger = get_logger(__name__)

API_VERSION = "2026.10.19.1"
CORS_ORIGINS = [o.strip() for o in os.getenv("OCUSCORE_CORS_ORIGINS", "*").split(",") if o.strip()]
CLAMP_INPUTS = os.getenv("OCUSCORE_CLAMP_INPUTS", "1").strip().lower() not in {"0", "false", "no", "off"}

app = FastAPI(title="OcuScore")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

DISCLAIMER = (
    "Decision support only. Not a diagnosis. "
    "Always confirm findings with a licensed eye care professional."
)


def _prepare(record: BaseModel) -> BaseModel:
    return normalize(record) if CLAMP_INPUTS else record


def _run(calc_id: str, record: BaseModel) -> BaseModel:
    try:
        return CALCULATORS[calc_id].run(_prepare(record))
    except InvalidMeasurementError as e:
        logger.info("Rejected %s input: %s", calc_id, e)
        raise HTTPException(status_code=422, detail={"message": str(e)})


@app.get("/health")
def health():
    return {
        "ok": True,
        "api_version": API_VERSION,
        "score_engine_version": scoring_module.SCORE_ENGINE_VERSION,
    }


@app.get("/calculators", response_model=list[CalculatorInfo])
def calculators():
    return list_calculators()


@app.post("/calculate/{calc_id}")
def calculate(calc_id: str, payload: dict = Body(...)):
    calc = CALCULATORS.get(calc_id)
    if calc is None:
        logger.info("Unknown calculator requested: %s", calc_id)
        raise HTTPException(
            status_code=404,
            detail={"message": f"Unknown calculator: {calc_id}", "available": sorted(CALCULATORS)},
        )
    try:
        record = calc.input_model.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    return _run(calc_id, record)


@app.post("/eye-health-score", response_model=EyeHealthResponse)
def eye_health_score(req: EyeHealthInput):
    return EyeHealthResponse(
        api_version=API_VERSION,
        score_engine_version=scoring_module.SCORE_ENGINE_VERSION,
        assessment=calculate_eye_health_score(_prepare(req)),
        disclaimer=DISCLAIMER,
    )


@app.post("/report")
def report(req: ReportRequest):
    patient_name = (req.patient_name or "").strip()
    safe_name = "".join(ch.lower() for ch in patient_name if ch.isalnum() or ch in {"-", "_", " "}).strip().replace(" ", "-")
    filename = f"{safe_name}-eye-health-report.pdf" if safe_name else "eye-health-report.pdf"

    result = calculate_eye_health_score(_prepare(req.assessment))
    pdf_bytes = render_report_bytes(result, patient_name=patient_name)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
