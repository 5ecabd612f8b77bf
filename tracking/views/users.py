from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import User
from ..serializers import serialize_user


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_users(request):
    """Active users, optionally filtered by ``?role=``, for assignment pickers."""
    qs = User.objects.filter(is_active=True).order_by('id')
    role = request.query_params.get('role')
    if role:
        qs = qs.filter(role=role)
    return Response([serialize_user(u) for u in qs])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_user(request):
    return Response(serialize_user(request.user))
