import logging

from roles import RoleType, StaffRole
from roles.exceptions import RoleIntegrityError
from roles.models import Admin, Customer, DeliveryAgent, Manager, Staff

logger = logging.getLogger(__name__)


def admin_exists():
    return Admin.objects.exists()


def create_role_records(identity, role_type, restaurant=None):
    """
    Attach the role records a signup for `role_type` requires:

        customer -> Customer
        manager  -> Staff(MANAGER), Manager, Customer
        driver   -> Staff(DELIVERY), DeliveryAgent, Customer
        admin    -> Admin

    Must run inside the registration transaction. Admin creation raises
    IntegrityError when another admin already exists.
    """
    if role_type == RoleType.ADMIN:
        Admin.objects.create(identity=identity)
        return

    if role_type == RoleType.MANAGER:
        staff = Staff.objects.create(identity=identity, role=StaffRole.MANAGER, restaurant=restaurant)
        Manager.objects.create(staff=staff)
    elif role_type == RoleType.DRIVER:
        staff = Staff.objects.create(identity=identity, role=StaffRole.DELIVERY, restaurant=restaurant)
        DeliveryAgent.objects.create(staff=staff)
    elif role_type != RoleType.CUSTOMER:
        raise ValueError(f"Unknown role: {role_type}")

    Customer.objects.create(identity=identity)


def pick_active_role(role_types):
    """
    Return the highest-priority role type present in `role_types`
    (Admin > Manager > Driver > Customer), or None when it is empty.
    """
    for role_type in RoleType.PRIORITY:
        if role_type in role_types:
            return role_type
    return None


def _get_staff_role_record(staff):
    """
    Return (role_type, record) for a Staff base record.
    A base record without exactly its matching dependent row is an integrity error.
    """
    try:
        manager = staff.manager
    except Manager.DoesNotExist:
        manager = None
    try:
        delivery_agent = staff.delivery_agent
    except DeliveryAgent.DoesNotExist:
        delivery_agent = None

    if staff.role == StaffRole.MANAGER and manager and not delivery_agent:
        return RoleType.MANAGER, manager
    if staff.role == StaffRole.DELIVERY and delivery_agent and not manager:
        return RoleType.DRIVER, delivery_agent

    logger.error(
        f"Staff record {staff.id} (role={staff.role}) of identity {staff.identity_id} "
        f"has manager={manager is not None}, delivery_agent={delivery_agent is not None}"
    )
    raise RoleIntegrityError(
        f"Staff record of identity {staff.identity_id} has no matching {staff.role.lower()} record."
    )


def get_role_records(identity):
    """
    Load every role record attached to `identity`.

    Returns a dict mapping RoleType -> record. Manager and driver entries hold
    the Manager / DeliveryAgent row; its Staff base record is reachable via `.staff`.
    """
    records = {}

    admin = Admin.objects.filter(identity=identity).first()
    if admin:
        records[RoleType.ADMIN] = admin

    staff = (
        Staff.objects
        .select_related('manager', 'delivery_agent')
        .filter(identity=identity)
        .first()
    )
    if staff:
        role_type, record = _get_staff_role_record(staff)
        records[role_type] = record

    customer = Customer.objects.filter(identity=identity).first()
    if customer:
        records[RoleType.CUSTOMER] = customer

    return records


def get_role_types(identity):
    return set(get_role_records(identity))


def build_role_payload(role_type, record):
    """Assemble the variant-specific active role payload."""
    if role_type == RoleType.ADMIN:
        return {'type': role_type, 'admin_id': str(record.id)}

    if role_type == RoleType.MANAGER:
        staff = record.staff
        return {
            'type': role_type,
            'manager_id': str(record.id),
            'staff_id': str(staff.id),
            'restaurant_id': str(staff.restaurant_id) if staff.restaurant_id else None,
        }

    if role_type == RoleType.DRIVER:
        staff = record.staff
        return {
            'type': role_type,
            'agent_id': str(record.id),
            'staff_id': str(staff.id),
            'restaurant_id': str(staff.restaurant_id) if staff.restaurant_id else None,
        }

    return {'type': role_type, 'customer_id': str(record.id)}


def resolve_active_role(identity):
    """
    Compute the single active role of an authenticated identity.

    Raises RoleIntegrityError when the identity holds no role records or an
    orphaned Staff base record; that is never a valid state and must not be
    mistaken for an authentication failure.
    """
    records = get_role_records(identity)
    active_role = pick_active_role(records)

    if active_role is None:
        logger.error(f"Identity {identity.id} has no role records")
        raise RoleIntegrityError(f"Identity {identity.id} has no role records.")

    return build_role_payload(active_role, records[active_role])
