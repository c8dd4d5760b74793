"""
Main API router aggregator
"""
from fastapi import APIRouter, Depends

from legal_estate.api.v1.deps import get_current_user
from legal_estate.api.v1.endpoints import (
    auth,
    cases,
    clients,
    documents,
    health,
    incident,
    insurance,
    medical,
    notes,
    settlements,
    tasks,
    users,
)

api_router = APIRouter()

# Public
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])

# Everything else requires a bearer token
protected = [Depends(get_current_user)]
api_router.include_router(users.router, prefix="/users", tags=["Users"], dependencies=protected)
api_router.include_router(clients.router, prefix="/clients", tags=["Clients"], dependencies=protected)
api_router.include_router(cases.router, prefix="/cases", tags=["Cases"], dependencies=protected)
api_router.include_router(medical.router, prefix="/medical", tags=["Medical"], dependencies=protected)
api_router.include_router(incident.router, prefix="/incident", tags=["Incident"], dependencies=protected)
api_router.include_router(insurance.router, prefix="/insurance", tags=["Insurance"], dependencies=protected)
api_router.include_router(documents.router, prefix="/documents", tags=["Documents"], dependencies=protected)
api_router.include_router(settlements.router, prefix="/settlements", tags=["Settlements"], dependencies=protected)
api_router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"], dependencies=protected)
api_router.include_router(notes.router, prefix="/notes", tags=["Notes"], dependencies=protected)
