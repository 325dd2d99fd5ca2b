"""
Event model: append-only log of inventory changes.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class EventQuerySet(models.QuerySet):

    def for_organization(self, organization):
        return self.filter(organization=organization)

    def for_transaction(self, transaction_id: int):
        return self.filter(eventable_id=transaction_id)


class Event(models.Model):
    """
    One committed or destroyed transaction, as seen by downstream
    projections (historical reports, activity feeds).

    ``data`` holds the affected deltas:
        {"deltas": [{"storage_location_id": 1, "item_id": 4, "quantity": -20}]}

    The transaction may be gone (destroy events), so it is referenced by
    id and kind rather than by foreign key.
    """

    organization = models.ForeignKey(
        'supplybank.Organization',
        on_delete=models.CASCADE,
        related_name='events',
    )
    event_type = models.CharField(
        max_length=50,
        db_index=True,
        verbose_name=_('Type'),
        help_text=_('Ex: "purchase_event", "purchase_destroy_event"'),
    )
    eventable_kind = models.CharField(max_length=20, verbose_name=_('Transaction kind'))
    eventable_id = models.PositiveBigIntegerField(db_index=True, verbose_name=_('Transaction id'))
    data = models.JSONField(default=dict, blank=True)
    event_time = models.DateTimeField(default=timezone.now, db_index=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )

    objects = EventQuerySet.as_manager()

    class Meta:
        verbose_name = _('Event')
        verbose_name_plural = _('Events')
        ordering = ['event_time', 'pk']

    def __str__(self) -> str:
        return f"{self.event_type} {self.eventable_kind}:{self.eventable_id}"
