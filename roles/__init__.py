class RoleType:
    ADMIN = 'admin'
    MANAGER = 'manager'
    DRIVER = 'driver'
    CUSTOMER = 'customer'

    CHOICES = (
        (ADMIN, 'Admin'),
        (MANAGER, 'Manager'),
        (DRIVER, 'Driver'),
        (CUSTOMER, 'Customer'),
    )

    # highest first
    PRIORITY = (ADMIN, MANAGER, DRIVER, CUSTOMER)


class StaffRole:
    MANAGER = 'MANAGER'
    DELIVERY = 'DELIVERY'

    CHOICES = (
        (MANAGER, 'Manager'),
        (DELIVERY, 'Delivery'),
    )


class StaffStatus:
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    SUSPENDED = 'suspended'

    CHOICES = (
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
        (SUSPENDED, 'Suspended'),
    )


DASHBOARD_PATHS = {
    RoleType.ADMIN: '/admin-portal/',
    RoleType.MANAGER: '/manager/',
    RoleType.DRIVER: '/driver/',
    RoleType.CUSTOMER: '/',
}
