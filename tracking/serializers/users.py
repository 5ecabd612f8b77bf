from ..models import User
from .common import iso


def serialize_user(u: User) -> dict:
    return {
        'id': u.id,
        'username': u.username,
        'name': u.display_name,
        'email': u.email,
        'phone': u.phone,
        'role': u.role,
        'department': u.department,
        'isActive': u.is_active,
        'createdAt': iso(u.created_at),
    }


def serialize_user_brief(u: User) -> dict:
    return {
        'id': u.id,
        'name': u.display_name,
        'role': u.role,
        'department': u.department,
    }
