"""FastAPI application entry point."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .setup_logging import setup_logging
from .api.routes import analyze, generate, sequence

# Get settings
settings = get_settings()
setup_logging(settings.log_level)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Procedural generator and validator for voxel climbing-puzzle levels",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(generate.router)
app.include_router(sequence.router)
app.include_router(analyze.router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Climbing Level Generator API",
        "endpoints": {
            "generate": "/api/generate",
            "export": "/api/levels/export",
            "sequence_import": "/api/sequence/import",
            "sequence_size": "/api/sequence/size",
            "sequence_vectors": "/api/sequence/vectors",
            "validate": "/api/validate",
            "hint": "/api/hint",
            "docs": "/docs",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "climbgen.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
