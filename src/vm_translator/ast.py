'''
dataclases de instrucciones VM clasificadas (Arithmetic, MemoryAccess, Branch, FunctionOp)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union, Literal

Direction = Literal["push", "pop"]
BranchKind = Literal["label", "goto", "if-goto"]
FunctionKind = Literal["function", "call", "return"]

# ---- Instrucciones a nivel de fuente ----
# line/text sólo sirven para diagnosticar; no participan en la generación.

@dataclass(frozen=True)
class Arithmetic:
    """Operación aritmética/lógica sin operandos (add, sub, neg, eq, ...)."""
    op: str
    line: int = 0
    text: str = ""

@dataclass(frozen=True)
class MemoryAccess:
    """push/pop entre la cima de la pila y una celda de un segmento."""
    direction: Direction
    segment: str
    index: int
    line: int = 0
    text: str = ""

@dataclass(frozen=True)
class Branch:
    """Definición de etiqueta o salto (incondicional o condicional)."""
    kind: BranchKind
    label: str
    line: int = 0
    text: str = ""

@dataclass(frozen=True)
class FunctionOp:
    """function name nLocals / call name nArgs / return."""
    kind: FunctionKind
    name: Optional[str] = None
    count: Optional[int] = None
    line: int = 0
    text: str = ""

# None representa "sin instrucción" (línea vacía o comentario)
Command = Union[Arithmetic, MemoryAccess, Branch, FunctionOp]
