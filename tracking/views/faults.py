"""
Fault report endpoints.

Reads are enriched with the equipment, reporter and assignee in one
query per related table.  Writes go through :mod:`tracking.services.faults`
which pushes ``new_fault_report`` to technicians and
``fault_report_updated`` to everyone.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import FaultReport
from ..serializers import FaultReportCreateSerializer, FaultReportUpdateSerializer
from ..services.enrichment import enrich_fault_reports
from ..services.faults import create_fault_report, update_fault_report


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def fault_reports(request):
    if request.method == 'GET':
        qs = FaultReport.objects.all().order_by('-reported_at', '-id')
        status_val = request.query_params.get('status')
        priority = request.query_params.get('priority')
        if status_val:
            qs = qs.filter(status=status_val)
        if priority:
            qs = qs.filter(priority=priority)
        return Response(enrich_fault_reports(qs))

    s = FaultReportCreateSerializer(data=request.data, context={'request': request})
    s.is_valid(raise_exception=True)
    return Response(create_fault_report(s), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def fault_report_detail(request, pk: int):
    report = get_object_or_404(FaultReport, pk=pk)
    if request.method == 'GET':
        return Response(enrich_fault_reports([report])[0])
    s = FaultReportUpdateSerializer(report, data=request.data, partial=True, context={'request': request})
    s.is_valid(raise_exception=True)
    return Response(update_fault_report(s))
