"""
Parties: who goods come from and who they go to.

Vendors sell to the bank, donation sites, manufacturers and product
drives give to it, partner agencies receive distributions from it.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from supplybank.models.enums import PartnerStatus


class Vendor(models.Model):
    organization = models.ForeignKey(
        'supplybank.Organization',
        on_delete=models.CASCADE,
        related_name='vendors',
    )
    business_name = models.CharField(max_length=255, verbose_name=_('Business name'))
    contact_name = models.CharField(max_length=255, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    phone = models.CharField(max_length=50, blank=True, default='')
    address = models.CharField(max_length=255, blank=True, default='')
    comment = models.TextField(blank=True, default='')
    active = models.BooleanField(default=True, verbose_name=_('Active'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Vendor')
        verbose_name_plural = _('Vendors')
        ordering = ['business_name']

    def __str__(self) -> str:
        return self.business_name


class Partner(models.Model):
    """A partner agency that receives distributions."""

    organization = models.ForeignKey(
        'supplybank.Organization',
        on_delete=models.CASCADE,
        related_name='partners',
    )
    name = models.CharField(max_length=255, verbose_name=_('Name'))
    email = models.EmailField(blank=True, default='')
    status = models.CharField(
        max_length=20,
        choices=PartnerStatus.choices,
        default=PartnerStatus.APPROVED,
        verbose_name=_('Status'),
    )
    notes = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Partner')
        verbose_name_plural = _('Partners')
        ordering = ['name']

    @property
    def is_deactivated(self) -> bool:
        return self.status == PartnerStatus.DEACTIVATED

    def __str__(self) -> str:
        return self.name


class DonationSite(models.Model):
    organization = models.ForeignKey(
        'supplybank.Organization',
        on_delete=models.CASCADE,
        related_name='donation_sites',
    )
    name = models.CharField(max_length=255, verbose_name=_('Name'))
    address = models.CharField(max_length=255, blank=True, default='')
    contact_name = models.CharField(max_length=255, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    active = models.BooleanField(default=True)

    class Meta:
        verbose_name = _('Donation site')
        verbose_name_plural = _('Donation sites')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class Manufacturer(models.Model):
    organization = models.ForeignKey(
        'supplybank.Organization',
        on_delete=models.CASCADE,
        related_name='manufacturers',
    )
    name = models.CharField(max_length=255, verbose_name=_('Name'))

    class Meta:
        verbose_name = _('Manufacturer')
        verbose_name_plural = _('Manufacturers')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class ProductDrive(models.Model):
    organization = models.ForeignKey(
        'supplybank.Organization',
        on_delete=models.CASCADE,
        related_name='product_drives',
    )
    name = models.CharField(max_length=255, verbose_name=_('Name'))
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)

    class Meta:
        verbose_name = _('Product drive')
        verbose_name_plural = _('Product drives')
        ordering = ['-start_date', 'name']

    def __str__(self) -> str:
        return self.name


class ProductDriveParticipant(models.Model):
    organization = models.ForeignKey(
        'supplybank.Organization',
        on_delete=models.CASCADE,
        related_name='product_drive_participants',
    )
    business_name = models.CharField(max_length=255, blank=True, default='')
    contact_name = models.CharField(max_length=255, verbose_name=_('Contact name'))
    email = models.EmailField(blank=True, default='')

    class Meta:
        verbose_name = _('Product drive participant')
        verbose_name_plural = _('Product drive participants')
        ordering = ['contact_name']

    def __str__(self) -> str:
        return self.business_name or self.contact_name
