# --------------------------------------------------------------
# File: __init__.py
# Description: Exposición pública del núcleo de cifrado PrivateBin.
# --------------------------------------------------------------
"""Inicializa el paquete `privatebin` y documenta sus módulos principales."""

__all__ = [
    "codec",
    "compression",
    "config",
    "content",
    "crypto_kdf",
    "crypto_sym",
    "errors",
    "keys",
    "models",
]
