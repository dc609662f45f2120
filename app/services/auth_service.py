"""
User registration and credential checks
"""
import logging
from typing import Optional
import bcrypt
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.models import User

logger = logging.getLogger(__name__)


class AuthService:
    """Registration and login against the users table"""
    
    def register(self, db: Session, username: str, password: str, role: str) -> Optional[User]:
        """
        Create a user
        
        Returns:
            The new user, or None if the username is taken
        """
        user = User(username=username, password_hash=self._hash_password(password), role=role)
        
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
        except IntegrityError:
            db.rollback()
            logger.info(f"Registration rejected, username taken: {username}")
            return None
        
        logger.info(f"User registered: {user.id} ({role})")
        return user
    
    def authenticate(self, db: Session, username: str, password: str) -> Optional[User]:
        """Return the user when the credentials match"""
        user = db.query(User).filter(User.username == username).first()
        if user and self._verify_password(password, user.password_hash):
            return user
        return None
    
    def _hash_password(self, password: str) -> str:
        """Hash a password using bcrypt"""
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
    
    def _verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is not a bcrypt hash")
            return False


# Global instance
auth_service = AuthService()
