"""
Role records attached to an Identity.

An identity may hold several of these at once (every manager and driver is
also a customer); roles.utils picks the active one by priority.
"""
from django.conf import settings
from django.db import models

from core.models import AbstractUUID, AbstractMonitor
from restaurants.models import Restaurant
from roles import StaffRole, StaffStatus


class Customer(AbstractUUID, AbstractMonitor):
    identity = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='customer'
    )

    class Meta:
        db_table = 'customers'

    def __str__(self):
        return f"Customer {self.identity_id}"


class Staff(AbstractUUID, AbstractMonitor):
    """
    Base record shared by managers and delivery agents.
    Always paired with exactly one Manager or DeliveryAgent row matching `role`.
    """
    identity = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='staff'
    )
    role = models.CharField(max_length=16, choices=StaffRole.CHOICES)
    status = models.CharField(
        max_length=16, choices=StaffStatus.CHOICES, default=StaffStatus.ACTIVE
    )
    restaurant = models.ForeignKey(
        Restaurant, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='staff'
    )

    class Meta:
        db_table = 'staff'
        verbose_name_plural = 'Staff'

    def __str__(self):
        return f"{self.role} {self.identity_id}"


class Manager(AbstractUUID, AbstractMonitor):
    staff = models.OneToOneField(Staff, on_delete=models.CASCADE, related_name='manager')

    class Meta:
        db_table = 'managers'

    def __str__(self):
        return f"Manager {self.staff_id}"


class DeliveryAgent(AbstractUUID, AbstractMonitor):
    staff = models.OneToOneField(Staff, on_delete=models.CASCADE, related_name='delivery_agent')
    is_available = models.BooleanField(
        default=False,
        help_text="Whether the agent is currently accepting deliveries"
    )

    class Meta:
        db_table = 'delivery_agents'

    def __str__(self):
        return f"Delivery agent {self.staff_id}"


class Admin(AbstractUUID, AbstractMonitor):
    """
    Platform administrator. At most one row may exist.

    `singleton` holds the same value on every row and is unique, so the
    database rejects a second admin even when two registrations race past
    the application-level existence check.
    """
    identity = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='admin'
    )
    singleton = models.BooleanField(default=True, unique=True, editable=False)

    class Meta:
        db_table = 'admins'

    def __str__(self):
        return f"Admin {self.identity_id}"
