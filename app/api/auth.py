"""
Registration and login API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from app.database import get_db
from app.schemas.auth import LoginRequest, RegisterRequest, UserOut
from app.services.auth_service import auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=UserOut, status_code=201)
async def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """Register a teacher or student"""
    
    user = auth_service.register(db, request.username, request.password, request.role)
    if user is None:
        raise HTTPException(status_code=400, detail="Username already exists")
    
    return user


@router.post("/login", response_model=UserOut)
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Check credentials and return the user's identity and role"""
    
    user = auth_service.authenticate(db, request.username, request.password)
    if user is None:
        logger.info(f"Failed login for {request.username}")
        raise HTTPException(status_code=401, detail="Invalid credentials")
    
    return user
