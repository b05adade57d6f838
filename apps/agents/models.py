from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


class Agent(models.Model):
    """
    Field agent who signs up shops and earns commission on their payments.

    ``total_shops`` and ``total_earnings`` are running balances. They are
    only ever changed with ``F()`` increments (see ``apps.agents.services``)
    so concurrent payments on different listings converge.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Dashboard login, optional for agents managed entirely by admins
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='agent_profile'
    )

    name = models.CharField(max_length=100)
    phone = models.CharField(max_length=20, unique=True)
    email = models.EmailField(unique=True)
    agent_code = models.CharField(max_length=20, unique=True)

    # Running balances
    total_shops = models.PositiveIntegerField(default=0)
    total_earnings = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'agents'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.agent_code})"

    def save(self, *args, **kwargs):
        self.agent_code = (self.agent_code or '').strip().upper()
        super().save(*args, **kwargs)
