from fastapi import APIRouter

from app.assessment.catalog import get_company_catalog

router = APIRouter()

@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    return {"status": "healthy", "companies": len(get_company_catalog())}
