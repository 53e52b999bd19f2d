from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .job_rollup.api_job_rollup import router as job_rollup_router

logger = logging.getLogger(__name__)


app = FastAPI(title="Shop Floor Job Rollup")
app.include_router(job_rollup_router)
logger.info("Job Rollup API loaded successfully")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health():
    return {"status": "ok"}
