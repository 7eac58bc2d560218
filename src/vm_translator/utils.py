'''
rangos sin signo para inmediatos de la máquina destino
'''

from __future__ import annotations

def is_unsigned_nbit(x: int, n: int) -> bool:
    """Devuelve True si x está en [0, 2^n) (sin signo de n bits)."""
    if n <= 0:
        raise ValueError("n debe ser positivo")
    return 0 <= x < (1 << n)
