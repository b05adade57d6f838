from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from drf_spectacular.types import OpenApiTypes

from apps.accounts.permissions import IsAdminOrAgent, IsAdminRole, agent_for_user
from apps.agents.models import Agent

from .plans import all_plans
from .permissions import CanManageListing
from .serializers import (
    ListingCreateInputSerializer,
    MarkPaymentInputSerializer,
    RenewListingInputSerializer,
    PaymentPeriodSerializer,
    PlanSerializer,
    ErrorSerializer,
    MarkPaymentResponseSerializer,
    RenewListingResponseSerializer,
    DeleteListingResponseSerializer,
    serialize_listing,
)
from apps.listings.services import (
    get_listing_pair,
    register_listing,
    mark_paid,
    renew_listing,
    delete_listing,
    expire_listings,
    # Exceptions
    ListingServiceError,
    ListingNotFoundError,
)


class ListingViewSet(viewsets.ViewSet):
    """
    ViewSet for listing payments.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    create: Register a listing (agent or admin)
    retrieve: Get either copy of a listing
    destroy: Delete a listing and reverse its ledger effects
    mark_payment_done: Mark a listing as paid
    renew: Book another year for an expired listing
    plans: Plan catalog
    check_expiry: Hide expired listings (admin only)
    """

    permission_classes = [IsAuthenticated, IsAdminOrAgent, CanManageListing]

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action == 'plans':
            return [IsAuthenticated()]
        if self.action == 'check_expiry':
            return [IsAuthenticated(), IsAdminRole()]
        return super().get_permissions()

    def _get_pair(self, request, pk):
        pair = get_listing_pair(listing_id=pk)
        self.check_object_permissions(request, pair)
        return pair

    @extend_schema(
        request=ListingCreateInputSerializer,
        responses={201: OpenApiTypes.OBJECT, 400: ErrorSerializer},
        tags=['listings'],
    )
    def create(self, request):
        """Register a PENDING listing."""
        serializer = ListingCreateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        agent_id = data.pop('agent', None)

        if request.user.is_admin_role:
            if agent_id is None:
                return Response(
                    {'error': 'agent is required when registering as admin'},
                    status=status.HTTP_400_BAD_REQUEST
                )
            agent = Agent.objects.filter(id=agent_id).first()
            if agent is None:
                return Response(
                    {'error': f'Agent with id {agent_id} not found'},
                    status=status.HTTP_404_NOT_FOUND
                )
            data['created_by_admin'] = request.user
        else:
            agent = agent_for_user(request.user)

        try:
            listing = register_listing(agent=agent, **data)
        except ListingServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(serialize_listing(listing), status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: OpenApiTypes.OBJECT, 404: ErrorSerializer}, tags=['listings'])
    def retrieve(self, request, pk=None):
        """Get a listing from whichever store holds it."""
        try:
            pair = self._get_pair(request, pk)
        except ListingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(serialize_listing(pair.primary))

    @extend_schema(
        responses={200: DeleteListingResponseSerializer, 404: ErrorSerializer},
        tags=['listings'],
    )
    def destroy(self, request, pk=None):
        """Delete a listing, reversing commission and revenue if it was paid."""
        try:
            self._get_pair(request, pk)
            result = delete_listing(listing_id=pk)
        except ListingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ListingServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'success': True,
            'message': 'Listing deleted successfully',
            'deductions': result.deductions,
            'warnings': [str(warning) for warning in result.warnings],
        })

    @extend_schema(
        request=MarkPaymentInputSerializer,
        responses={
            200: MarkPaymentResponseSerializer,
            400: ErrorSerializer,
            404: ErrorSerializer,
        },
        tags=['listings'],
    )
    @action(detail=True, methods=['post'], url_path='mark-payment-done')
    def mark_payment_done(self, request, pk=None):
        """
        Mark a listing as paid.

        POST /api/listings/{id}/mark-payment-done/
        Body: {"plan_type": "PREMIUM", "amount": "2999", "payment_mode": "UPI"}
        """
        serializer = MarkPaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            self._get_pair(request, pk)
            result = mark_paid(listing_id=pk, **serializer.validated_data)
        except ListingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ListingServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        if result.was_pending:
            message = 'Payment marked as done successfully'
        else:
            message = 'Listing was already paid; payment details updated'

        return Response({
            'success': True,
            'message': message,
            'listing': serialize_listing(result.listing),
            'commission': result.commission,
            'receipt': result.receipt,
            'warnings': [str(warning) for warning in result.warnings],
        })

    @extend_schema(
        request=RenewListingInputSerializer,
        responses={
            200: RenewListingResponseSerializer,
            400: ErrorSerializer,
            404: ErrorSerializer,
        },
        tags=['listings'],
    )
    @action(detail=True, methods=['post'])
    def renew(self, request, pk=None):
        """
        Renew an expired listing for another year.

        POST /api/listings/{id}/renew/
        Body: {"plan_type": "PREMIUM", "payment_mode": "CASH"}
        """
        serializer = RenewListingInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            self._get_pair(request, pk)
            result = renew_listing(listing_id=pk, **serializer.validated_data)
        except ListingNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ListingServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'success': True,
            'message': 'Listing renewed successfully',
            'listing': serialize_listing(result.listing),
            'commission': result.commission,
            'receipt': result.receipt,
            'previous_period': PaymentPeriodSerializer(result.previous_period).data,
            'warnings': [str(warning) for warning in result.warnings],
        })

    @extend_schema(responses={200: PlanSerializer(many=True)}, tags=['listings'])
    @action(detail=False, methods=['get'])
    def plans(self, request):
        """Plan catalog."""
        return Response(PlanSerializer(all_plans(), many=True).data)

    @extend_schema(request=None, responses={200: OpenApiTypes.OBJECT}, tags=['listings'])
    @action(detail=False, methods=['post'], url_path='check-expiry')
    def check_expiry(self, request):
        """Hide listings whose paid year has run out."""
        hidden = expire_listings()
        return Response({
            'success': True,
            'message': f'Hid {hidden} expired listing(s)',
            'expired_count': hidden,
        })
