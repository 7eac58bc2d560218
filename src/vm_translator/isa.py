'''
tabla formal del lenguaje VM (familias de instrucciones, operaciones aritméticas)
y constantes de la máquina destino de 16 bits
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

@dataclass(frozen=True)
class OpSpec:
    """Especificación de una operación aritmética/lógica de la VM.

    - kind: 'unary', 'binary' o 'compare'
    - comp: expresión de la ALU que produce el resultado (unary/binary)
    - jump: condición de salto sobre left-right (compare)
    """
    kind: str
    comp: Optional[str] = None
    jump: Optional[str] = None

# Familias de palabras clave
ARITHMETIC: Dict[str, OpSpec] = {}
MEMORY_COMMANDS: FrozenSet[str] = frozenset({"push", "pop"})
BRANCH_COMMANDS: FrozenSet[str] = frozenset({"label", "goto", "if-goto"})
FUNCTION_COMMANDS: FrozenSet[str] = frozenset({"function", "call", "return"})

def _add(name: str, spec: OpSpec):
    ARITHMETIC[name] = spec

# Unarias: operan sobre la celda de la cima
_add("neg", OpSpec("unary", comp="-M"))
_add("not", OpSpec("unary", comp="!M"))

# Binarias: D = derecha, M = izquierda
_add("add", OpSpec("binary", comp="D+M"))
_add("sub", OpSpec("binary", comp="M-D"))
_add("and", OpSpec("binary", comp="D&M"))
_add("or",  OpSpec("binary", comp="D|M"))

# Comparaciones: salto sobre D = left - right
_add("eq", OpSpec("compare", jump="JEQ"))
_add("gt", OpSpec("compare", jump="JGT"))
_add("lt", OpSpec("compare", jump="JLT"))

# ---- Máquina destino ----

STACK_BASE = 256        # valor inicial de SP en el bootstrap
TEMP_BASE = 5           # temp 0..7 -> RAM[5..12]
TEMP_SIZE = 8
MAX_CONSTANT = 32767    # inmediato de una instrucción-A (15 bits)
FRAME_REG = "R13"       # fin de marco en return / dirección destino en pop
RETADDR_REG = "R14"     # dirección de retorno en return
ENTRY_POINT = "Sys.init"
TRUE = -1
FALSE = 0

def op_spec(op: str) -> OpSpec:
    """Devuelve la especificación de una operación aritmética."""
    if op not in ARITHMETIC:
        raise KeyError(f"Operación desconocida: {op}")
    return ARITHMETIC[op]
