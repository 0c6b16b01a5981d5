"""Abstract contracts implemented by the infrastructure and core layers."""
