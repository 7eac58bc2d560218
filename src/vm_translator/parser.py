# src/vm_translator/parser.py
from __future__ import annotations
from typing import Iterable, Iterator, List, Optional

from .lexer import strip_comment, split_tokens, is_index, is_symbol
from .ast import Arithmetic, MemoryAccess, Branch, FunctionOp, Command
from .isa import ARITHMETIC, MEMORY_COMMANDS, BRANCH_COMMANDS, FUNCTION_COMMANDS
from .segments import is_segment
from .diagnostics import error, MalformedInstructionError, InvalidSegmentError

def _malformed(message: str, text: str, line: int, file: Optional[str], hint: str | None = None):
    return MalformedInstructionError(error(message, line=line, file=file, source=text, hint=hint))

def classify(text: str, *, line: int = 0, file: Optional[str] = None) -> Optional[Command]:
    """
    Clasifica una línea VM. Devuelve None si la línea no contiene instrucción
    (vacía o sólo comentario).

    Reglas:
      - Comentarios: '//' hasta fin de línea.
      - El primer token decide la familia; el número de tokens es fijo por familia.
      - Sólo se valida la forma: no se comprueba que las funciones o etiquetas existan.
    """
    core = strip_comment(text)
    if not core:
        return None
    tokens = split_tokens(core)
    head, args = tokens[0], tokens[1:]

    # 1) Aritméticas/lógicas: sin operandos
    if head in ARITHMETIC:
        if args:
            raise _malformed(f"'{head}' no admite operandos", core, line, file)
        return Arithmetic(op=head, line=line, text=core)

    # 2) push/pop segmento índice
    if head in MEMORY_COMMANDS:
        if len(args) != 2:
            raise _malformed(f"'{head}' espera segmento e índice", core, line, file,
                             hint=f"{head} local 0")
        segment, index = args
        if not is_segment(segment):
            raise InvalidSegmentError(error(f"Segmento desconocido: '{segment}'",
                                            line=line, file=file, source=core))
        if not is_index(index):
            raise InvalidSegmentError(error(f"Índice inválido: '{index}' (entero no negativo)",
                                            line=line, file=file, source=core))
        return MemoryAccess(direction=head, segment=segment, index=int(index), line=line, text=core)

    # 3) label/goto/if-goto etiqueta
    if head in BRANCH_COMMANDS:
        if len(args) != 1:
            raise _malformed(f"'{head}' espera exactamente una etiqueta", core, line, file)
        if not is_symbol(args[0]):
            raise _malformed(f"Etiqueta inválida: '{args[0]}'", core, line, file)
        return Branch(kind=head, label=args[0], line=line, text=core)

    # 4) function/call nombre n, return
    if head in FUNCTION_COMMANDS:
        if head == "return":
            if args:
                raise _malformed("'return' no admite operandos", core, line, file)
            return FunctionOp(kind="return", line=line, text=core)
        if len(args) != 2:
            raise _malformed(f"'{head}' espera nombre y cantidad", core, line, file,
                             hint=f"{head} Main.main 0")
        name, count = args
        if not is_symbol(name):
            raise _malformed(f"Nombre de función inválido: '{name}'", core, line, file)
        if not is_index(count):
            raise _malformed(f"Cantidad inválida: '{count}' (entero no negativo)", core, line, file)
        return FunctionOp(kind=head, name=name, count=int(count), line=line, text=core)

    raise _malformed(f"Instrucción desconocida: '{head}'", core, line, file)


class Parser:
    """Clasificador con cursor sobre las líneas de un archivo .vm.

    next() consume líneas hasta encontrar una instrucción real y la devuelve;
    al agotarse la entrada devuelve None. Las líneas vacías y de comentario
    nunca llegan al llamador.
    """

    def __init__(self, lines: Iterable[str], *, filename: Optional[str] = None):
        self._lines = iter(lines)
        self._lineno = 0
        self._pending: Optional[Command] = None
        self.filename = filename

    def _advance(self) -> Optional[Command]:
        for raw in self._lines:
            self._lineno += 1
            cmd = classify(raw, line=self._lineno, file=self.filename)
            if cmd is not None:
                return cmd
        return None

    def has_more_commands(self) -> bool:
        if self._pending is None:
            self._pending = self._advance()
        return self._pending is not None

    def next(self) -> Optional[Command]:
        if self._pending is not None:
            cmd, self._pending = self._pending, None
            return cmd
        return self._advance()

    def __iter__(self) -> Iterator[Command]:
        while True:
            cmd = self.next()
            if cmd is None:
                return
            yield cmd


def parse(text: str, *, filename: Optional[str] = None) -> List[Command]:
    """Clasifica todo el texto. Lanza TranslationError en la primera línea mal formada."""
    return list(Parser(text.split("\n"), filename=filename))
