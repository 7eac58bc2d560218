'''
mapeos segmento VM -> celdas base / direcciones fijas, validaciones de índice
'''

from __future__ import annotations
from typing import Dict

from .isa import TEMP_BASE, TEMP_SIZE, MAX_CONSTANT
from .utils import is_unsigned_nbit

# Segmentos internos: dirección efectiva = RAM[base] + índice
INTERNAL_BASE: Dict[str, str] = {
    "local": "LCL",
    "argument": "ARG",
    "this": "THIS",
    "that": "THAT",
}

# pointer 0/1 es un alias directo de THIS/THAT
POINTER_ALIAS: Dict[int, str] = {0: "THIS", 1: "THAT"}

SPECIAL = ("constant", "static", "pointer", "temp")

SEGMENTS = frozenset(INTERNAL_BASE) | frozenset(SPECIAL)

def is_segment(token: str) -> bool:
    """Indica si el token es uno de los ocho segmentos de la VM."""
    return token in SEGMENTS

def is_internal(segment: str) -> bool:
    return segment in INTERNAL_BASE

def base_symbol(segment: str) -> str:
    """Devuelve la celda base (LCL, ARG, THIS, THAT) o lanza ValueError."""
    try:
        return INTERNAL_BASE[segment]
    except KeyError:
        raise ValueError(f"Segmento sin celda base: {segment}") from None

def pointer_symbol(index: int) -> str:
    """pointer 0 -> THIS, pointer 1 -> THAT."""
    if index not in POINTER_ALIAS:
        raise ValueError(f"Índice de pointer fuera de rango: {index} (esperado 0 o 1)")
    return POINTER_ALIAS[index]

def temp_symbol(index: int) -> str:
    """temp i -> R(5+i), i en 0..7."""
    if not 0 <= index < TEMP_SIZE:
        raise ValueError(f"Índice de temp fuera de rango: {index} (esperado 0..{TEMP_SIZE - 1})")
    return f"R{TEMP_BASE + index}"

def static_symbol(file_id: str, index: int) -> str:
    """static i del archivo 'Main' -> 'Main.i'. El ensamblador asigna la celda."""
    if not file_id:
        raise ValueError("static requiere identidad de archivo")
    return f"{file_id}.{index}"

def check_constant(index: int) -> int:
    if not is_unsigned_nbit(index, 15):
        raise ValueError(f"Constante fuera de rango: {index} (esperado 0..{MAX_CONSTANT})")
    return index

def check_index(index: int) -> int:
    """local/argument/this/that: el desplazamiento se carga con una instrucción-A."""
    if not is_unsigned_nbit(index, 15):
        raise ValueError(f"Índice fuera de rango: {index} (esperado 0..{MAX_CONSTANT})")
    return index
