"""API router configuration."""

from fastapi import APIRouter

from app.api.endpoints import access, appointments, clinic_locations, health, users

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(access.router, tags=["Access"])
api_router.include_router(clinic_locations.router, tags=["Clinic Locations"])
api_router.include_router(appointments.router, tags=["Appointments"])
api_router.include_router(users.router, tags=["Users"])
