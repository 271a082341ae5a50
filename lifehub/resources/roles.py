"""Role lookups; never served from the query cache."""

import logging
from sqlalchemy.exc import IntegrityError
from lifehub.extensions import db
from lifehub.models.role import UserRole

logger = logging.getLogger(__name__)

ADMIN = 'admin'


class RoleService:
    """
    Reads and grants roles.

    Role membership is security-sensitive, so every check goes to the
    database.
    """

    @staticmethod
    def roles_for(user_id):
        if user_id is None:
            return set()
        rows = UserRole.query.filter_by(user_id=user_id).all()
        return {row.role for row in rows}

    @classmethod
    def has_role(cls, user_id, role):
        return role in cls.roles_for(user_id)

    @classmethod
    def is_admin(cls, user_id):
        return cls.has_role(user_id, ADMIN)

    @staticmethod
    def assign(user_id, role):
        """
        Grant role to the user; granting an existing role is a no-op.

        Returns:
            bool: True if a new assignment was created
        """
        if UserRole.query.filter_by(user_id=user_id, role=role).first():
            return False
        db.session.add(UserRole(user_id=user_id, role=role))
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return False
        logger.info(f"Granted role '{role}' to user {user_id}")
        return True
