"""Find Ansible runs in local or remote auth logs."""

__version__ = "1.0.0"
