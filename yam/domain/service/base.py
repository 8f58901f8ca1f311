"""Base class for domain services."""


class Service:
    """Marker base for domain services.

    A service wraps one or more repositories and is shared by every
    registration flow, so it must not keep per-flow state.
    """
