# thriftstock/services/auth_service.py
import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from thriftstock.core.database import commit_or_conflict
from thriftstock.core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from thriftstock.core.security import create_access_token, get_password_hash, verify_password
from thriftstock.models.stock import StockIn, StockOut
from thriftstock.models.user import Role, User, UserRole
from thriftstock.schemas.user import CurrentUser, StaffCreate

logger = logging.getLogger(__name__)


class AuthService:

    def authenticate_user(self, db: Session, username: str, password: str) -> User:
        """Return the user for valid credentials, else raise AuthError."""
        if not username or not password:
            raise ValidationError("Username and password are required")

        user = db.query(User).filter(User.username == username).first()
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %r", username)
            raise AuthError("Invalid username or password")

        return user

    def login(self, db: Session, username: str, password: str) -> Dict:
        user = self.authenticate_user(db, username, password)
        role = user.user_role

        access_token = create_access_token(data={"sub": str(user.user_id), "role": role.value})
        logger.info("User %s logged in as %s", user.username, role.value)

        return {
            "id": user.user_id,
            "email": user.username,
            "name": user.username,
            "role": role,
            "access_token": access_token,
            "token_type": "bearer",
        }

    def get_current_user(self, db: Session, user_id: int) -> Optional[CurrentUser]:
        user = db.get(User, user_id)
        if user is None:
            return None
        return CurrentUser(user_id=user.user_id, username=user.username, role=user.user_role)

    # ---- staff management ----

    def list_staff(self, db: Session) -> List[Dict]:
        rows = (
            db.query(User, Role.role_name)
            .outerjoin(Role, User.role_id == Role.role_id)
            .order_by(User.username.asc())
            .all()
        )
        return [self._format_user(user, role_name) for user, role_name in rows]

    def create_user(self, db: Session, data: StaffCreate) -> Dict:
        username = (data.username or "").strip()
        if not username or not data.password or not data.role_id:
            raise ValidationError("Username, password, and role are required")
        self._check_role(data.role_id)
        self._ensure_username_free(db, username)

        user = User(
            username=username,
            password_hash=get_password_hash(data.password),
            role_id=data.role_id,
            phone_number=data.phone_number or None,
            address=data.address or None,
        )
        db.add(user)
        commit_or_conflict(db, "Username already exists")
        db.refresh(user)
        logger.info("Created user %s (%s)", user.user_id, user.username)
        return self._format_user(user)

    def update_user(self, db: Session, user_id: int, data: StaffCreate) -> Dict:
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")

        if data.username is not None:
            username = data.username.strip()
            if not username:
                raise ValidationError("Username cannot be empty")
            self._ensure_username_free(db, username, exclude_id=user_id)
            user.username = username
        if data.password:
            user.password_hash = get_password_hash(data.password)
        if data.role_id is not None:
            self._check_role(data.role_id)
            user.role_id = data.role_id
        if data.phone_number is not None:
            user.phone_number = data.phone_number or None
        if data.address is not None:
            user.address = data.address or None

        commit_or_conflict(db, "Username already exists")
        db.refresh(user)
        return self._format_user(user)

    def delete_user(self, db: Session, user_id: int, acting_user: CurrentUser) -> None:
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        if user_id == acting_user.user_id:
            raise ConflictError("You cannot delete your own account")

        records = (
            db.query(func.count(StockIn.stock_in_id)).filter(StockIn.user_id == user_id).scalar()
            + db.query(func.count(StockOut.stock_out_id)).filter(StockOut.user_id == user_id).scalar()
        )
        if records:
            raise ConflictError(
                f"User has recorded {records} stock movement(s) and cannot be deleted",
                details={"stock_records": records},
            )

        db.delete(user)
        commit_or_conflict(db, "User is referenced by stock records")
        logger.info("Deleted user %s", user_id)

    def _check_role(self, role_id: int) -> None:
        if role_id not in {role.role_id for role in UserRole}:
            raise ValidationError(f"Unknown role_id {role_id}")

    def _ensure_username_free(self, db: Session, username: str, exclude_id: int = None) -> None:
        query = db.query(User).filter(User.username == username)
        if exclude_id is not None:
            query = query.filter(User.user_id != exclude_id)
        if query.first() is not None:
            raise ConflictError("Username already exists")

    def _format_user(self, user: User, role_name: Optional[str] = None) -> Dict:
        return {
            "user_id": user.user_id,
            "username": user.username,
            "role_id": user.role_id,
            "role_name": role_name or user.user_role.value,
            "phone_number": user.phone_number,
            "address": user.address,
            "created_at": user.created_at,
        }


auth_service = AuthService()
