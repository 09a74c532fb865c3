"""User Repository - Identity & credential store"""
from typing import Dict, Iterable, List, Optional
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from .mongo_client import get_collection
from ..domain.models import User, UserRef
from ..domain.errors import EmailAlreadyRegisteredError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class UserRepository:
    """Repository for user accounts"""

    def __init__(self):
        self._users: Collection = get_collection("users")

    def create_user(self, user: User) -> User:
        """
        Insert a new user

        The unique email index is the last line of defence when two
        registrations race past the service-level existence check.
        """
        doc = user.model_dump()
        doc["role"] = user.role.value
        doc["_id"] = user.user_id
        try:
            self._users.insert_one(doc)
        except DuplicateKeyError:
            raise EmailAlreadyRegisteredError(
                "User already exists",
                details={"email": user.email}
            )
        logger.info(f"Created user: {user.user_id}", extra={"user_id": user.user_id})
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        doc = self._users.find_one({"user_id": user_id})
        if doc:
            doc.pop("_id", None)
            return User.model_validate(doc)
        return None

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by login email (stored lower-cased)"""
        doc = self._users.find_one({"email": email.strip().lower()})
        if doc:
            doc.pop("_id", None)
            return User.model_validate(doc)
        return None

    def email_exists(self, email: str) -> bool:
        """Check whether an email is already registered"""
        return self._users.count_documents({"email": email.strip().lower()}, limit=1) > 0

    def get_refs(self, user_ids: Iterable[str]) -> Dict[str, UserRef]:
        """
        Resolve many user IDs to display references in one query

        Missing users are simply absent from the result.
        """
        ids: List[str] = list({uid for uid in user_ids if uid})
        if not ids:
            return {}
        cursor = self._users.find(
            {"user_id": {"$in": ids}},
            {"user_id": 1, "name": 1, "email": 1}
        )
        return {
            doc["user_id"]: UserRef(user_id=doc["user_id"], name=doc["name"], email=doc["email"])
            for doc in cursor
        }
