"""
Authentication service for user management and JWT token handling.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from goaltracker.database.models import User
from goaltracker.models.auth import TokenPayload
from goaltracker.config import Settings, get_settings
from goaltracker.exceptions import ConflictError, InvalidCredentialsError, NotFoundError
from goaltracker.utils.logger import get_logger

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Service for handling authentication operations."""

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        try:
            return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode('utf-8'))
        except ValueError as e:
            logger.error(f"Password verification error: {e}")
            return False

    def get_password_hash(self, password: str) -> str:
        """Hash a password with a per-password salt."""
        hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt())
        return hashed.decode('utf-8')

    def create_access_token(self, user_id: str, email: str) -> str:
        """Create a JWT access token."""
        now = datetime.now(timezone.utc)
        expire = now + timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        payload = {
            "sub": str(user_id),
            "email": email,
            "exp": int(expire.timestamp()),
            "iat": int(now.timestamp()),
        }
        return jwt.encode(payload, self.settings.SECRET_KEY, algorithm=self.settings.ALGORITHM)

    def verify_token(self, token: str) -> Optional[TokenPayload]:
        """Verify signature and expiry of a JWT token and decode it."""
        try:
            payload = jwt.decode(token, self.settings.SECRET_KEY, algorithms=[self.settings.ALGORITHM])
            return TokenPayload(**payload)
        except JWTError as e:
            logger.warning(f"JWT verification failed: {e}")
            return None
        except (TypeError, ValueError) as e:
            logger.warning(f"Malformed token payload: {e}")
            return None

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email address."""
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        return self.db.query(User).filter(User.id == str(user_id)).first()

    def create_user(self, email: str, password: str) -> User:
        """Create a new user."""
        if self.get_user_by_email(email):
            raise ConflictError("User already exists", context={"email": email})

        user = User(
            email=normalize_email(email),
            password_hash=self.get_password_hash(password),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # a concurrent registration took the email after the lookup
            self.db.rollback()
            raise ConflictError("User already exists", context={"email": email})
        self.db.refresh(user)

        logger.info(f"User created: {user.email}")
        return user

    def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate a user with email and password.

        Unknown email and wrong password raise the same error so callers
        cannot probe which emails are registered.
        """
        user = self.get_user_by_email(email)
        if not user or not self.verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Invalid credentials")
        return user

    def register(self, email: str, password: str) -> str:
        """Register a user and return a token bound to the new id."""
        user = self.create_user(email, password)
        return self.create_access_token(user.id, user.email)

    def login(self, email: str, password: str) -> str:
        """Authenticate and return a freshly issued token."""
        user = self.authenticate_user(email, password)
        logger.info(f"User logged in: {user.email}")
        return self.create_access_token(user.id, user.email)

    def update_email(self, user_id: str, email: str) -> User:
        """Change the email address of an existing user."""
        user = self._require_user(user_id)
        new_email = normalize_email(email)
        if new_email != user.email:
            existing = self.get_user_by_email(new_email)
            if existing:
                raise ConflictError("Email already in use", context={"email": new_email})
            user.email = new_email
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                raise ConflictError("Email already in use", context={"email": new_email})
            self.db.refresh(user)
            logger.info(f"Email updated for user: {user.id}")
        return user

    def reset_password(self, user_id: str, current_password: str, new_password: str) -> bool:
        """Replace the credential of a user who proves the current one."""
        user = self._require_user(user_id)
        if not self.verify_password(current_password, user.password_hash):
            raise InvalidCredentialsError("Current password is incorrect")

        user.password_hash = self.get_password_hash(new_password)
        self.db.commit()

        logger.info(f"Password reset for user: {user.email}")
        return True

    def _require_user(self, user_id: str) -> User:
        user = self.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user
