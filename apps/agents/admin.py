# ==========================================
# apps/agents/admin.py
# ==========================================

from django.contrib import admin

from .models import Agent
from .services import recalculate_agent_stats


@admin.register(Agent)
class AgentAdmin(admin.ModelAdmin):
    """
    Admin interface for field agents.

    Balances are read-only here; use the recalculate action to repair them.
    """

    list_display = [
        'agent_code',
        'name',
        'phone',
        'email',
        'total_shops',
        'total_earnings',
        'created_at',
    ]
    search_fields = ['agent_code', 'name', 'phone', 'email']
    readonly_fields = ['total_shops', 'total_earnings', 'created_at', 'updated_at']
    raw_id_fields = ['user']
    actions = ['recalculate_stats']

    @admin.action(description='Recalculate shops and earnings from listings')
    def recalculate_stats(self, request, queryset):
        updated = 0
        for agent in queryset:
            updated += len(recalculate_agent_stats(agent=agent))
        self.message_user(request, f'{updated} agent(s) updated.')
