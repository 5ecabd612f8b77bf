"""
Statistics and role dashboards.

Each dashboard is scoped to the role that opens it; admins may open all
three.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import User
from ..permissions import IsAdminRole
from ..services import statistics


def _require_role(user: User, role: str) -> None:
    if user.role not in (role, User.ROLE_ADMIN):
        raise PermissionDenied('لا تملك صلاحية الوصول إلى هذه اللوحة')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def equipment_statistics(request):
    return Response(statistics.equipment_statistics())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def technician_dashboard(request):
    _require_role(request.user, User.ROLE_TECHNICIAN)
    return Response(statistics.technician_dashboard(request.user))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def nurse_dashboard(request):
    _require_role(request.user, User.ROLE_NURSE)
    return Response(statistics.nurse_dashboard(request.user))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_dashboard(request):
    return Response(statistics.admin_dashboard())
