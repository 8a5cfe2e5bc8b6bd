"""
Core models module containing abstract base classes.
All models in the application should inherit from these base classes.

Usage:
    - AbstractUUID: Provides UUID primary key
    - AbstractMonitor: Provides created_at and updated_at timestamps
    - AbstractActive: Provides is_active soft delete functionality
    - AbstractBaseModel: Combines all three (UUID + Monitor + Active)
"""
import uuid

from django.db import models
from django_countries.fields import CountryField
from phonenumber_field.modelfields import PhoneNumberField

from .validators import validate_possible_number


class ActiveManager(models.Manager):
    """Manager that returns only active (non-deleted) records."""

    def get_queryset(self):
        return super().get_queryset().filter(is_active=True)


class AbstractUUID(models.Model):
    """
    Abstract base model that provides UUID primary key.
    """
    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record"
    )

    class Meta:
        abstract = True


class AbstractMonitor(models.Model):
    """
    Abstract base model that provides created_at and updated_at tracking.
    """
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Timestamp when the record was created"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Timestamp when the record was last updated"
    )

    class Meta:
        abstract = True
        ordering = ['-created_at']


class AbstractActive(models.Model):
    """
    Abstract base model with an is_active flag for soft deletion.

    `objects` keeps every row; `active` hides the deactivated ones.
    """
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Soft delete flag. Set to False to deactivate."
    )

    objects = models.Manager()
    active = ActiveManager()

    class Meta:
        abstract = True


class AbstractBaseModel(AbstractUUID, AbstractMonitor, AbstractActive):
    """
    UUID primary key, timestamps and soft delete flag together.
    Default base for restaurant-side models.
    """

    class Meta:
        abstract = True
        ordering = ['-created_at']


class PossiblePhoneNumberField(PhoneNumberField):
    """Less strict field for phone numbers written to database."""

    default_validators = [validate_possible_number]


class Address(AbstractUUID, AbstractActive):
    """
    Street address of a restaurant.
    """
    address_line_1 = models.CharField(max_length=256)
    address_line_2 = models.CharField(max_length=256, null=True, blank=True)
    city = models.CharField(max_length=256)
    city_area = models.CharField(max_length=128, null=True, blank=True)
    postal_code = models.CharField(max_length=20)
    country = CountryField()
    country_area = models.CharField(max_length=128, null=True, blank=True)

    class Meta:
        verbose_name_plural = 'Addresses'
        verbose_name = 'Address'

    def __str__(self):
        return self.address_string

    @property
    def address_string(self):
        address_parts = [
            self.address_line_1,
            self.address_line_2,
            self.city,
            self.city_area,
            self.country.name,
            self.country_area,
            self.postal_code,
        ]
        return ", ".join(filter(None, address_parts))
