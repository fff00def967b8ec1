"""Services — the concrete provisioning steps and read-only status."""
