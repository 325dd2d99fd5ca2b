"""
Organization model: the bank that owns everything else.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Organization(models.Model):
    """
    A diaper bank (or similar essentials bank).

    Items, storage locations, partners, vendors and transactions all
    belong to exactly one organization and may only reference records
    of that same organization.
    """

    name = models.CharField(
        max_length=255,
        verbose_name=_('Name'),
    )
    short_name = models.SlugField(
        unique=True,
        max_length=50,
        verbose_name=_('Short name'),
        help_text=_('Unique identifier (ex: pawnee-diaper-bank)'),
    )
    default_storage_location = models.ForeignKey(
        'supplybank.StorageLocation',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Default storage location'),
        help_text=_('Used when a transaction is created without a location.'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Organization')
        verbose_name_plural = _('Organizations')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name
