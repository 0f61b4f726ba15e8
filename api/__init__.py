# --------------------------------------------------------------
# File: __init__.py
# Description: Capa de servicios y transporte HTTP del cliente PrivateBin.
# --------------------------------------------------------------
"""Inicializa el paquete `api`."""

__all__ = ["services", "transport"]
