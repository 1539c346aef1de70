"""
Credit Audit Engine - FastAPI Application

Main entry point for the Credit Audit Engine backend.

Architecture:
- Raw report text → Extractor → ExtractionResult (SSOT #1)
- ExtractionResult → DiscrepancyDetector → List[Finding] (SSOT #2)
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import LOG_LEVEL
from .routers import audits_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title="Credit Audit Engine",
    description="""
    Credit Audit Engine - Cross-Bureau Discrepancy Detection

    This system reads the text of a three-bureau credit report, extracts one
    record per account per bureau, and flags inconsistencies between bureaus
    along with missing or expired items.

    ## Pipeline
    1. **Extractor**: Report text → ExtractionResult (SSOT #1)
    2. **Discrepancy Detector**: ExtractionResult → List[Finding] (SSOT #2)

    ## Key Principles
    - Each SSOT is immutable once created
    - The detector never reads raw text
    - Findings are detected deterministically (no LLMs)
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(audits_router)


@app.get("/")
async def root():
    """Root endpoint - API information."""
    return {
        "name": "Credit Audit Engine",
        "version": "1.0.0",
        "description": "Cross-Bureau Discrepancy Detection",
        "docs": "/docs",
        "architecture": {
            "ssot_1": "ExtractionResult - Output of Extractor",
            "ssot_2": "Finding[] - Output of Discrepancy Detector",
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


# For running with: python -m app.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
