# legal_estate/api/v1/deps.py

from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from legal_estate.core.security import decode_access_token
from legal_estate.db.database import Database
from legal_estate.db.models import User
from legal_estate.services.case_service import CaseService
from legal_estate.services.client_service import ClientService
from legal_estate.services.document_service import DocumentService
from legal_estate.services.incident_service import IncidentService
from legal_estate.services.insurance_service import InsuranceService
from legal_estate.services.medical_service import MedicalService
from legal_estate.services.note_service import NoteService
from legal_estate.services.settlement_service import SettlementService
from legal_estate.services.storage_service import DocumentStorage
from legal_estate.services.task_service import TaskService
from legal_estate.services.user_service import UserService

security = HTTPBearer()

# ============================================================================
# Application handles
# ============================================================================

def get_db(request: Request) -> Database:
    """The Database handle created at startup."""
    return request.app.state.database


def get_storage(request: Request) -> DocumentStorage:
    return request.app.state.storage

# ============================================================================
# JWT Dependency
# ============================================================================

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Database = Depends(get_db),
) -> User:
    """
    Validate JWT token and return current user.
    """
    try:
        payload = decode_access_token(credentials.credentials)
        user_id = UUID(str(payload.get("sub")))
    except (jwt.PyJWTError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await UserService(db).get_active_user(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user

# ============================================================================
# Services
# ============================================================================

def get_user_service(db: Database = Depends(get_db)) -> UserService:
    return UserService(db)


def get_client_service(db: Database = Depends(get_db)) -> ClientService:
    return ClientService(db)


def get_case_service(
    db: Database = Depends(get_db),
    storage: DocumentStorage = Depends(get_storage),
) -> CaseService:
    return CaseService(db, storage)


def get_medical_service(db: Database = Depends(get_db)) -> MedicalService:
    return MedicalService(db)


def get_incident_service(db: Database = Depends(get_db)) -> IncidentService:
    return IncidentService(db)


def get_insurance_service(db: Database = Depends(get_db)) -> InsuranceService:
    return InsuranceService(db)


def get_document_service(
    db: Database = Depends(get_db),
    storage: DocumentStorage = Depends(get_storage),
) -> DocumentService:
    return DocumentService(db, storage)


def get_task_service(db: Database = Depends(get_db)) -> TaskService:
    return TaskService(db)


def get_note_service(db: Database = Depends(get_db)) -> NoteService:
    return NoteService(db)


def get_settlement_service(db: Database = Depends(get_db)) -> SettlementService:
    return SettlementService(db)
