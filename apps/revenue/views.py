from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.accounts.permissions import IsAdminRole
from apps.listings.serializers import ErrorSerializer

from .serializers import (
    RevenueQuerySerializer,
    RebuildInputSerializer,
    RevenueLedgerSerializer,
)
from .services import (
    revenue_report,
    rebuild_revenue_ledger,
    RevenueServiceError,
)


@extend_schema(
    parameters=[
        OpenApiParameter('district', OpenApiTypes.STR, description="District name, or 'all'"),
        OpenApiParameter('start_date', OpenApiTypes.DATE, description='Start of date range'),
        OpenApiParameter('end_date', OpenApiTypes.DATE, description='End of date range'),
        OpenApiParameter('period', OpenApiTypes.STR, description="'all', 'today', 'week', 'month' or 'year'", default='all'),
    ],
    responses={200: OpenApiTypes.OBJECT, 400: ErrorSerializer},
    description="Revenue ledger rows and totals filtered by district and date range.",
    tags=['revenue'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def revenue_list(request):
    """Revenue report - thin HTTP handler."""
    query_serializer = RevenueQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        report = revenue_report(
            district=params.get('district'),
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
            period=params.get('period'),
        )
    except RevenueServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'district': report['district'] or 'all',
        'period': report['period'],
        'start_date': report['start_date'],
        'end_date': report['end_date'],
        'totals': report['totals'],
        'districts': report['districts'],
        'rows': RevenueLedgerSerializer(report['rows'], many=True).data,
    })


@extend_schema(
    request=RebuildInputSerializer,
    responses={200: OpenApiTypes.OBJECT, 400: ErrorSerializer},
    description="Recompute revenue rows from PAID listings and repair drifted rows.",
    tags=['revenue'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def rebuild(request):
    """Rebuild the revenue ledger - thin HTTP handler."""
    serializer = RebuildInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    params = serializer.validated_data

    try:
        drifts = rebuild_revenue_ledger(
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
            district=params.get('district') or None,
            apply=not params['dry_run'],
        )
    except RevenueServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'success': True,
        'dry_run': params['dry_run'],
        'drifted_rows': len(drifts),
        'drifts': [drift.as_dict() for drift in drifts],
    })
