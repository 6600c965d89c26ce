"""
Nullshot Backend - FastAPI routes for contract audit, fix and generation
"""
import logging
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from nullshot import __version__
from nullshot.audit.models import AuditReport, FixSuggestion, GeneratedContract, Vulnerability
from nullshot.errors import InvalidSubmission, NullshotError, ProviderTimeout, REMOTE_FAILURES
from nullshot.services import Services, build_services
from nullshot.utils.config_loader import load_config

# Load environment variables from .env file
load_dotenv()

_config = load_config()

# Configure logging
logging.basicConfig(level=str((_config.get("logging") or {}).get("level", "INFO")).upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="Nullshot API", version=__version__)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:3001", "http://127.0.0.1:3000", "http://127.0.0.1:3001"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class AuditRequest(BaseModel):
    code: Optional[str] = None


class FixRequest(BaseModel):
    code: Optional[str] = None
    vulnerability: Optional[Vulnerability] = None
    vulnerabilities: Optional[List[Vulnerability]] = None


class GenerateRequest(BaseModel):
    prompt: Optional[str] = None


@lru_cache(maxsize=1)
def get_services() -> Services:
    """Services built once from the loaded configuration."""
    return build_services(_config)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@app.exception_handler(NullshotError)
async def nullshot_error_handler(request: Request, exc: NullshotError):
    if isinstance(exc, InvalidSubmission):
        return _error(str(exc), 400)
    if isinstance(exc, ProviderTimeout):
        logger.error(f"{request.url.path}: {exc}")
        return _error(str(exc), 504)
    if isinstance(exc, REMOTE_FAILURES):
        logger.error(f"{request.url.path}: remote provider failed: {exc}")
        return _error(str(exc), 502)
    logger.error(f"{request.url.path}: {exc}")
    return _error(str(exc) or "Internal Server Error", 500)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}" for err in exc.errors()
    )
    return _error(f"Invalid request: {problems}", 400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"{request.url.path}: unhandled error")
    return _error(str(exc) or "Internal Server Error", 500)


@app.get("/")
async def root():
    return {
        "name": "Nullshot API",
        "version": __version__,
        "endpoints": {
            "audit": "/audit",
            "fix": "/fix",
            "generate": "/generate",
        },
    }


@app.post("/audit", response_model=AuditReport)
def audit(request: AuditRequest, services: Services = Depends(get_services)):
    """
    Audit Solidity source. The report's `source` says whether it came from
    the model or from the heuristic fallback.
    """
    if not request.code:
        return _error("Code is required", 400)
    return services.audit(request.code)


@app.post("/fix", response_model=FixSuggestion)
def fix(request: FixRequest, services: Services = Depends(get_services)):
    """
    Fix one vulnerability (`vulnerability`) or all of them in one pass
    (`vulnerabilities`, answered with vulnerabilityId "all").
    """
    if request.vulnerabilities is not None:
        if not request.code:
            return _error("Code is required", 400)
        return services.fix(request.code, request.vulnerabilities)

    if not request.code or request.vulnerability is None:
        return _error("Code and vulnerability are required", 400)
    return services.fix(request.code, request.vulnerability)


@app.post("/generate", response_model=GeneratedContract)
def generate(request: GenerateRequest, services: Services = Depends(get_services)):
    """Generate a contract from a natural-language prompt."""
    if not request.prompt:
        return _error("Prompt is required", 400)
    return services.generate(request.prompt)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
