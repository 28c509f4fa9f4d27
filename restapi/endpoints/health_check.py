"""Health check endpoint for monitoring application status."""

from fastapi import APIRouter, Request

from components.core import schemas

router = APIRouter(
    prefix="/health_check",
    tags=["services"],
    responses={200: {"description": "Service is healthy"}},
)


@router.get("/", response_model=schemas.HealthCheck)
async def health_check(request: Request) -> schemas.HealthCheck:
    """Check the health status of the service and the database probes run at startup."""
    probes = getattr(request.app.state, "db_probes", [])
    return schemas.HealthCheck(
        service_name="Persian Finance Tracker",
        status="healthy",
        unsupported_features=[probe.name for probe in probes if not probe.ok],
    )
