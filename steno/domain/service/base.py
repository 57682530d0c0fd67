"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the invitation, verification and provisioning
    rules that span letters, cases and users.
    """

    pass
