from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'listings'

router = DefaultRouter()
router.register(r'', views.ListingViewSet, basename='listing')

urlpatterns = [
    # Listing ViewSet routes
    # POST   /api/listings/                         - Register listing
    # GET    /api/listings/{id}/                    - Get listing (either copy)
    # DELETE /api/listings/{id}/                    - Delete listing, reverse ledgers

    # Custom actions
    # POST   /api/listings/{id}/mark-payment-done/  - Mark listing as paid
    # GET    /api/listings/plans/                   - Plan catalog
    # POST   /api/listings/check-expiry/            - Hide expired listings

    # Include router URLs
    path('', include(router.urls)),
]
