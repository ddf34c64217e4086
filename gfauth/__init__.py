"""Token authentication, role-based access rules and resource ownership checks."""

__version__ = "0.1.0"