# src/vm_translator/codegen.py
from __future__ import annotations
from typing import Optional, Set, Type

from .ast import Arithmetic, MemoryAccess, Branch, FunctionOp, Command
from .isa import (op_spec, STACK_BASE, FRAME_REG, RETADDR_REG, ENTRY_POINT,
                  TRUE, FALSE)
from .segments import (is_internal, base_symbol, pointer_symbol, temp_symbol,
                       static_symbol, check_constant, check_index)
from .writers import AsmProgram
from .diagnostics import (error, TranslationError, InvalidSegmentError,
                          UndefinedScopeError, DuplicateLabelError)

# ---------------- Plantillas comunes ----------------

# *SP = D; SP++
PUSH_D = ("@SP", "A=M", "M=D", "@SP", "M=M+1")
# SP--; D = *SP
POP_D = ("@SP", "AM=M-1", "D=M")

# Orden en que call guarda la base de los segmentos del llamador
SAVED_BASES = ("LCL", "ARG", "THIS", "THAT")

HALT_LABEL = "BOOTSTRAP_HALT"

def qualify_label(function: str, label: str) -> str:
    """Etiqueta de usuario dentro de una función: 'Main.loop$END'."""
    return f"{function}${label}"

def return_label(callee: str, n: int) -> str:
    return f"{callee}$ret.{n}"

def compare_labels(n: int) -> tuple[str, str]:
    return f"CMP_TRUE_{n}", f"CMP_END_{n}"

# ---------------- Generador ----------------

class CodeWriter:
    """Traduce instrucciones VM clasificadas a ensamblador Hack.

    Estado de toda la traducción (persiste entre archivos):
      - contador de etiquetas (comparaciones y direcciones de retorno),
      - función abierta (califica etiquetas; '' = ninguna),
      - identidad del archivo actual (nombres de static),
      - etiquetas ya definidas (detección de duplicados).
    """

    def __init__(self, out: Optional[AsmProgram] = None, *,
                 stack_base: int = STACK_BASE, annotate: bool = True):
        self.out = out if out is not None else AsmProgram()
        self.stack_base = stack_base
        self.annotate = annotate
        self.file_name = ""
        self.current_function = ""
        self._label_counter = 0
        self._defined: Set[str] = set()

    # ---- estado ----

    def set_file_name(self, file_id: str) -> None:
        """Cambia el espacio de nombres de static; el resto del estado se conserva."""
        self.file_name = file_id

    def _next_label_id(self) -> int:
        n = self._label_counter
        self._label_counter += 1
        return n

    def _fail(self, exc: Type[TranslationError], message: str, cmd: Command,
              hint: str | None = None) -> TranslationError:
        return exc(error(message, line=cmd.line or None, file=self.file_name or None,
                         source=cmd.text or None, hint=hint))

    def _annotate(self, text: str) -> None:
        if self.annotate:
            self.out.comment(text)

    def _define(self, label: str, cmd: Command) -> None:
        """Emite (label). Toda etiqueta, de usuario o generada, pasa por aquí."""
        if label in self._defined:
            raise self._fail(DuplicateLabelError, f"Etiqueta redefinida: {label}", cmd)
        self._defined.add(label)
        self.out.label(label)

    def _require_function(self, cmd: Command) -> str:
        if not self.current_function:
            raise self._fail(UndefinedScopeError,
                             f"'{cmd.text or type(cmd).__name__}' fuera de una función", cmd,
                             hint="declare antes 'function Nombre n'")
        return self.current_function

    # ---- despacho ----

    def write(self, cmd: Optional[Command]) -> None:
        """Emite el bloque de una instrucción. None (sin instrucción) no altera nada."""
        if cmd is None:
            return
        if isinstance(cmd, Arithmetic):
            self.write_arithmetic(cmd)
        elif isinstance(cmd, MemoryAccess):
            self.write_push_pop(cmd)
        elif isinstance(cmd, Branch):
            self.write_branch(cmd)
        elif isinstance(cmd, FunctionOp):
            if cmd.kind == "function":
                self.write_function(cmd)
            elif cmd.kind == "call":
                self.write_call(cmd)
            elif cmd.kind == "return":
                self.write_return(cmd)
            else:
                raise ValueError(f"Tipo de FunctionOp no soportado: {cmd.kind}")
        else:
            raise TypeError(f"Instrucción no soportada: {cmd!r}")

    # ---- aritmética ----

    def write_arithmetic(self, cmd: Arithmetic) -> None:
        spec = op_spec(cmd.op)
        self._annotate(cmd.text or cmd.op)
        p = self.out
        if spec.kind == "unary":
            p.add("@SP", "A=M-1", f"M={spec.comp}")
        elif spec.kind == "binary":
            # D = derecha; A apunta a la izquierda (nueva cima)
            p.add(*POP_D, "A=A-1", f"M={spec.comp}")
        else:
            true_l, end_l = compare_labels(self._next_label_id())
            p.add(*POP_D, "A=A-1", "D=M-D", f"@{true_l}", f"D;{spec.jump}")
            p.add("@SP", "A=M-1", f"M={FALSE}", f"@{end_l}", "0;JMP")
            self._define(true_l, cmd)
            p.add("@SP", "A=M-1", f"M={TRUE}")
            self._define(end_l, cmd)

    # ---- memoria ----

    def write_push_pop(self, cmd: MemoryAccess) -> None:
        seg, i = cmd.segment, cmd.index
        try:
            if seg == "constant":
                if cmd.direction == "pop":
                    raise self._fail(InvalidSegmentError, "No se puede hacer pop a 'constant'", cmd)
                check_constant(i)
            elif seg == "static":
                if not self.file_name:
                    raise self._fail(InvalidSegmentError, "static sin identidad de archivo", cmd,
                                     hint="llame a set_file_name() antes de traducir")
                symbol = static_symbol(self.file_name, i)
            elif seg == "pointer":
                symbol = pointer_symbol(i)
            elif seg == "temp":
                symbol = temp_symbol(i)
            elif is_internal(seg):
                base = base_symbol(seg)
                check_index(i)
            else:
                raise ValueError(f"Segmento desconocido: {seg}")
        except ValueError as ex:
            raise self._fail(InvalidSegmentError, str(ex), cmd) from None

        self._annotate(cmd.text or f"{cmd.direction} {seg} {i}")
        p = self.out
        if cmd.direction == "push":
            if seg == "constant":
                p.add(f"@{i}", "D=A")
            elif is_internal(seg):
                p.add(f"@{i}", "D=A", f"@{base}", "A=D+M", "D=M")
            else:
                p.add(f"@{symbol}", "D=M")
            p.add(*PUSH_D)
        else:
            if is_internal(seg):
                # dirección destino en R13; D queda libre para el valor
                p.add(f"@{i}", "D=A", f"@{base}", "D=D+M", f"@{FRAME_REG}", "M=D")
                p.add(*POP_D, f"@{FRAME_REG}", "A=M", "M=D")
            else:
                p.add(*POP_D, f"@{symbol}", "M=D")

    # ---- saltos ----

    def write_branch(self, cmd: Branch) -> None:
        label = qualify_label(self._require_function(cmd), cmd.label)
        self._annotate(cmd.text or f"{cmd.kind} {cmd.label}")
        if cmd.kind == "label":
            self._define(label, cmd)
        elif cmd.kind == "goto":
            self.out.add(f"@{label}", "0;JMP")
        elif cmd.kind == "if-goto":
            # el pop ocurre antes de evaluar la condición
            self.out.add(*POP_D, f"@{label}", "D;JNE")
        else:
            raise ValueError(f"Tipo de Branch no soportado: {cmd.kind}")

    def write_label(self, label: str) -> None:
        self.write_branch(Branch("label", label))

    def write_goto(self, label: str) -> None:
        self.write_branch(Branch("goto", label))

    def write_if(self, label: str) -> None:
        self.write_branch(Branch("if-goto", label))

    # ---- funciones ----

    def write_function(self, cmd: FunctionOp) -> None:
        """(f) y n_locals ceros en la pila: el segmento local empieza en SP."""
        self._annotate(cmd.text or f"function {cmd.name} {cmd.count}")
        self._define(cmd.name, cmd)
        self.current_function = cmd.name
        for _ in range(cmd.count):
            self.out.add("@SP", "A=M", "M=0", "@SP", "M=M+1")

    def write_call(self, cmd: FunctionOp) -> None:
        ret = return_label(cmd.name, self._next_label_id())
        self._annotate(cmd.text or f"call {cmd.name} {cmd.count}")
        p = self.out
        p.add(f"@{ret}", "D=A", *PUSH_D)
        for base in SAVED_BASES:
            p.add(f"@{base}", "D=M", *PUSH_D)
        # ARG = SP - 5 - n_args
        p.add("@SP", "D=M", "@5", "D=D-A", f"@{cmd.count}", "D=D-A", "@ARG", "M=D")
        # LCL = SP
        p.add("@SP", "D=M", "@LCL", "M=D")
        p.add(f"@{cmd.name}", "0;JMP")
        self._define(ret, cmd)

    def write_return(self, cmd: FunctionOp) -> None:
        self._require_function(cmd)
        self._annotate(cmd.text or "return")
        p = self.out
        # R13 = frame (LCL); R14 = *(frame-5), leído antes de pisar ARG[0]
        p.add("@LCL", "D=M", f"@{FRAME_REG}", "M=D")
        p.add("@5", "A=D-A", "D=M", f"@{RETADDR_REG}", "M=D")
        # *ARG = pop(); SP = ARG + 1
        p.add(*POP_D, "@ARG", "A=M", "M=D")
        p.add("@ARG", "D=M+1", "@SP", "M=D")
        # THAT, THIS, ARG, LCL = *(frame-1), *(frame-2), ...
        for base in reversed(SAVED_BASES):
            p.add(f"@{FRAME_REG}", "AM=M-1", "D=M", f"@{base}", "M=D")
        p.add(f"@{RETADDR_REG}", "A=M", "0;JMP")

    # ---- bootstrap ----

    def write_init(self) -> None:
        """SP = stack_base; call Sys.init 0; bucle de parada si Sys.init retorna."""
        self._annotate("bootstrap")
        self.out.add(f"@{self.stack_base}", "D=A", "@SP", "M=D")
        entry = FunctionOp("call", name=ENTRY_POINT, count=0)
        self.write_call(entry)
        self._define(HALT_LABEL, entry)
        self.out.add(f"@{HALT_LABEL}", "0;JMP")
