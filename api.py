"""
FastAPI web application for the Site Auditor
"""
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel
from typing import Dict, Optional
import asyncio
import logging
from datetime import datetime
import uvicorn

from site_auditor import SiteAuditor
from progress import ProgressChannel
from monitoring import setup_logging
from config import config

logger = logging.getLogger(__name__)

# Response models
class HealthResponse(BaseModel):
    status: str
    timestamp: datetime

# Initialize FastAPI app
app = FastAPI(
    title="Site Auditor API",
    description="Single-page SEO, performance and accessibility audits with streamed progress",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every incoming request"""
    logger.info(f"{request.method} request")
    logger.info(f"URL: {request.url}")
    return await call_next(request)

@app.on_event("startup")
async def startup_event():
    """Configure logging on startup"""
    setup_logging()
    logger.info("Site Auditor API started successfully")

async def stream_audit_events(auditor: SiteAuditor, site: str, channel: ProgressChannel):
    """Run the audit in its own task and relay its events as SSE messages.

    If the client goes away the generator is closed and the audit task is
    cancelled, which releases its browser session and pending probes.
    """
    task = asyncio.create_task(auditor.run(site, channel))
    try:
        async for event in channel:
            yield event.to_sse()
        await task
    finally:
        if not task.done():
            logger.info(f"Client disconnected, cancelling audit for {site}")
            task.cancel()

# API Endpoints

@app.get("/", response_model=Dict[str, str])
async def root():
    """Root endpoint"""
    return {
        "message": "Site Auditor API",
        "version": "1.0.0",
        "audit": "/audit?site=<url>",
        "docs": "/docs",
        "health": "/health"
    }

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(status="healthy", timestamp=datetime.now())

@app.get("/audit")
async def audit_site(site: Optional[str] = Query(None, description="URL of the page to audit")):
    """Audit a page and stream progress as Server-Sent Events"""
    logger.info(f"Auditing site: {site}")
    if not site:
        return JSONResponse(status_code=400, content={"error": "Site URL is required."})

    auditor = SiteAuditor(config)
    channel = ProgressChannel()
    return StreamingResponse(
        stream_audit_events(auditor, site, channel),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive"
        }
    )

# Custom exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "timestamp": datetime.now().isoformat()
        }
    )

if __name__ == "__main__":
    uvicorn.run(
        "api:app",
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower()
    )
