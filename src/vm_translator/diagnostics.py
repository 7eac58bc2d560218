'''
clase Diagnostic, errores fatales de traducción y helpers (archivo/línea)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Literal

# Todo diagnóstico del traductor es fatal
Severity = Literal["error"]

_SEV_TO_LABEL = {"error": "ERROR"}

@dataclass(frozen=True)
class Diagnostic:
    """Estructura de un diagnóstico para reportar problemas.

    Ubicación opcional (archivo y línea), el texto de la instrucción VM
    que lo provocó y un mensaje de ayuda (pista).
    """
    severity: Severity
    message: str
    line: Optional[int] = None
    hint: Optional[str] = None
    file: Optional[str] = None
    source: Optional[str] = None

    def __str__(self) -> str:
        loc = ""
        if self.file is not None:
            loc += f"{self.file}:"
        if self.line is not None:
            loc += f"{self.line}"
        if loc:
            loc += ": "
        sev = _SEV_TO_LABEL.get(self.severity, str(self.severity).upper())
        core = f"{sev}: {self.message}"
        if self.source:
            core += f" en '{self.source}'"
        if self.hint:
            core += f"  (pista: {self.hint})"
        return loc + core

def error(message: str, *, line: int | None = None,
          file: str | None = None, hint: str | None = None,
          source: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo error."""
    return Diagnostic("error", message, line, hint, file, source)

# ---- Errores fatales ----

class TranslationError(Exception):
    """Error fatal: la traducción se aborta y no se escribe salida.

    Lleva el Diagnostic con archivo, línea y texto de la instrucción.
    """

    def __init__(self, diagnostic: Diagnostic):
        super().__init__(str(diagnostic))
        self.diagnostic = diagnostic

class MalformedInstructionError(TranslationError):
    """La línea no encaja con ninguna forma de instrucción VM."""

class InvalidSegmentError(TranslationError):
    """push/pop con segmento desconocido o índice fuera de rango."""

class UndefinedScopeError(TranslationError):
    """label/goto/if-goto/return sin ninguna función abierta."""

class DuplicateLabelError(TranslationError):
    """Etiqueta calificada (o función) definida dos veces."""
