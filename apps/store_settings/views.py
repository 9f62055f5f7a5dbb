from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import SettingSerializer, SettingInputSerializer
from .services import list_settings, set_setting
from .services.exceptions import InvalidSettingError


@extend_schema(
    methods=['GET'],
    description="All settings, stored values merged over defaults.",
    tags=['settings'],
)
@extend_schema(
    methods=['POST'],
    request=SettingInputSerializer,
    responses={200: SettingSerializer},
    description="Create or update a setting (staff only).",
    tags=['settings'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def settings_view(request):
    """
    GET  /api/settings/ - read settings (any authenticated user)
    POST /api/settings/ - upsert a setting (staff only)
    """
    if request.method == 'GET':
        return Response(list_settings())

    if not request.user.is_staff:
        raise PermissionDenied('Only staff users can change settings.')

    serializer = SettingInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        setting = set_setting(
            key=serializer.validated_data['key'],
            value=serializer.validated_data['value'],
        )
    except InvalidSettingError as e:
        raise ValidationError({'value': str(e)})

    return Response(SettingSerializer(setting).data, status=status.HTTP_200_OK)
