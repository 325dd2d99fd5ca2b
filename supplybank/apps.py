"""Django app configuration for SupplyBank."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class SupplyBankConfig(AppConfig):
    """Configuration for SupplyBank app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "supplybank"
    verbose_name = _("Inventory")
