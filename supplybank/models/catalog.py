"""
Item catalog: the goods an organization tracks.
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class ItemCategory(models.Model):
    """Free-form grouping of items (ex: Diapers, Period Supplies)."""

    organization = models.ForeignKey(
        'supplybank.Organization',
        on_delete=models.CASCADE,
        related_name='item_categories',
    )
    name = models.CharField(max_length=255, verbose_name=_('Name'))
    description = models.TextField(blank=True, default='')

    class Meta:
        verbose_name = _('Item category')
        verbose_name_plural = _('Item categories')
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'name'],
                name='unique_item_category_per_organization',
            )
        ]

    def __str__(self) -> str:
        return self.name


class ItemQuerySet(models.QuerySet):

    def active(self):
        return self.filter(active=True)

    def for_organization(self, organization):
        return self.filter(organization=organization)


class Item(models.Model):
    """
    A trackable good, scoped to one organization.

    Deactivated items cannot appear on new transactions but stay
    referenced by historical line items (deletion is protected).
    """

    organization = models.ForeignKey(
        'supplybank.Organization',
        on_delete=models.CASCADE,
        related_name='items',
    )
    name = models.CharField(max_length=255, verbose_name=_('Name'))
    category = models.ForeignKey(
        'supplybank.ItemCategory',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='items',
        verbose_name=_('Category'),
    )
    value_in_cents = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Fair market value (cents)'),
    )
    active = models.BooleanField(default=True, verbose_name=_('Active'))
    on_hand_minimum_quantity = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Minimum on hand'),
        help_text=_('Low stock is reported when the organization total drops below this.'),
    )
    on_hand_recommended_quantity = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Recommended on hand'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ItemQuerySet.as_manager()

    class Meta:
        verbose_name = _('Item')
        verbose_name_plural = _('Items')
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'name'],
                name='unique_item_name_per_organization',
            )
        ]

    @property
    def value_in_dollars(self) -> Decimal:
        return Decimal(self.value_in_cents) / 100

    def deactivate(self) -> None:
        self.active = False
        self.save(update_fields=['active', 'updated_at'])

    def reactivate(self) -> None:
        self.active = True
        self.save(update_fields=['active', 'updated_at'])

    def __str__(self) -> str:
        return self.name
