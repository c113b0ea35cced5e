"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text

from scanstock.catalog import get_reference_catalog
from scanstock.db.database import get_db


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, db: Session):
        self._db = db

    def check_database(self) -> str:
        """Check database connectivity."""
        try:
            self._db.execute(text("SELECT 1"))
            return "healthy"
        except SQLAlchemyError:
            return "unhealthy"

    def check_reference(self) -> dict:
        """Check reference set status."""
        stats = get_reference_catalog().get_stats()
        return {
            "status": "healthy" if stats.loaded else "not_loaded",
            "barcodes": stats.total_barcodes,
        }

    def get_health(self) -> dict:
        """Get full health status."""
        db_status = self.check_database()
        reference_info = self.check_reference()

        overall = "healthy" if db_status == "healthy" else "degraded"

        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "database": db_status,
                "reference": reference_info["status"]
            },
            "details": {
                "reference_barcodes": reference_info["barcodes"]
            }
        }


@router.get("")
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns system status including API, database, and reference set.
    An unloaded reference set does not degrade the status; scans are
    classified against an empty set until it loads.
    """
    controller = HealthController(db)
    return controller.get_health()


@router.get("/ready")
async def readiness_check():
    """Readiness probe for container orchestration."""
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}
