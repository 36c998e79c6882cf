from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.logging_config import configure_logging
from modules.payslip import payslip_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    logger.info("Starting payslip service in %s mode", settings.environment.upper())
    yield


app = FastAPI(
    title="Payslip Engine API",
    description="""
    Payslip computation and document rendering.

    ## Features

    * **Totals preview** - Recompute gross, tax, deductions and net pay on every change
    * **Payslip PDF** - Single-page payslip with a QR verification code
    """,
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(payslip_router)


@app.get("/")
def read_root():
    return {"message": "Payslip Engine API", "version": app.version}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
