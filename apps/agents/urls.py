from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'agents'

router = DefaultRouter()
router.register(r'', views.AgentViewSet, basename='agent')

urlpatterns = [
    # Agent ViewSet routes
    # GET    /api/agents/                            - List agents
    # GET    /api/agents/{id}/                       - Get agent

    # Custom actions
    # POST   /api/agents/{id}/recalculate-earnings/  - Rebuild one agent's earnings
    # POST   /api/agents/recalculate-stats/          - Rebuild every agent's balances

    # Include router URLs
    path('', include(router.urls)),
]
