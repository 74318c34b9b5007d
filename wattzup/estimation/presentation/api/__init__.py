"""
API package.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .routes import estimates
from ...application.builder import EstimationApplicationBuilder

# Initialize main app
app = FastAPI(title="WattzUp Wait-Time API")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(estimates.app.router, tags=["estimates"])

def configure(builder: EstimationApplicationBuilder) -> FastAPI:
    """Wires the built estimators into the routes and returns the app."""
    estimator = builder.estimator or builder.build_estimator()
    batch_estimator = builder.batch_estimator or builder.build_batch_estimator()
    estimates.init_estimators(
        estimator,
        batch_estimator,
        max_batch_size=builder.config.api.max_batch_size,
        metrics_collector=builder.metrics_collector
    )
    return app
