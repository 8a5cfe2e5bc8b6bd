from django.db import models

from core.models import AbstractBaseModel, Address, PossiblePhoneNumberField


class Restaurant(AbstractBaseModel):
    """
    A restaurant on the platform. Managers and delivery agents are attached
    to one through their Staff record.
    """
    name = models.CharField(max_length=256)
    phone = PossiblePhoneNumberField(blank=True, default="", db_index=True)
    address = models.ForeignKey(
        Address, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='restaurants'
    )

    class Meta:
        ordering = ['name']
        verbose_name = 'Restaurant'
        verbose_name_plural = 'Restaurants'

    def __str__(self):
        return self.name
