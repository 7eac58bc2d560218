from __future__ import annotations
import argparse, logging, sys
from pathlib import Path
from typing import Iterable, List, Tuple

from .parser import Parser
from .codegen import CodeWriter
from .writers import AsmProgram, write_asm
from .diagnostics import TranslationError
from .isa import ENTRY_POINT

LOGGER = logging.getLogger("vm_translator.translator")

VM_SUFFIX = ".vm"
ASM_SUFFIX = ".asm"

Source = Tuple[str, str]   # (identidad del archivo, texto VM)

def translate_sources(sources: Iterable[Source], *, bootstrap: bool = True,
                      annotate: bool = True) -> AsmProgram:
    """Traduce los archivos en el orden dado a un único programa.

    El CodeWriter se comparte entre archivos: contador de etiquetas, función
    abierta y etiquetas definidas persisten; sólo cambia la identidad de static.
    Lanza TranslationError en el primer error fatal.
    """
    writer = CodeWriter(annotate=annotate)
    if bootstrap:
        writer.write_init()
    for file_id, text in sources:
        writer.set_file_name(file_id)
        parser = Parser(text.split("\n"), filename=file_id)
        count = 0
        for cmd in parser:
            writer.write(cmd)
            count += 1
        LOGGER.debug("%s: %d instrucciones, %d líneas de salida", file_id, count, len(writer.out))
    return writer.out

def translate_text(text: str, *, file_id: str = "Main", bootstrap: bool = False,
                   annotate: bool = True) -> AsmProgram:
    """Atajo para un único archivo (sin bootstrap por defecto)."""
    return translate_sources([(file_id, text)], bootstrap=bootstrap, annotate=annotate)

def collect_sources(path: str | Path) -> List[Path]:
    """Un archivo .vm, o los .vm de un directorio ordenados por nombre."""
    p = Path(path)
    if p.is_dir():
        files = sorted(f for f in p.iterdir() if f.is_file() and f.suffix == VM_SUFFIX)
        if not files:
            raise ValueError(f"No hay archivos {VM_SUFFIX} en {p}")
        return files
    if p.suffix != VM_SUFFIX:
        raise ValueError(f"Se esperaba un archivo {VM_SUFFIX} o un directorio: {p}")
    return [p]

def default_output(path: str | Path) -> Path:
    """X.vm -> X.asm ; dir/ -> dir/dir.asm"""
    p = Path(path)
    if p.is_dir():
        return p / (p.resolve().name + ASM_SUFFIX)
    return p.with_suffix(ASM_SUFFIX)

def wants_bootstrap(files: Iterable[Path]) -> bool:
    """Por defecto sólo se emite bootstrap si alguno de los archivos es Sys.vm."""
    entry_file = ENTRY_POINT.split(".")[0]
    return any(f.stem == entry_file for f in files)

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="VM -> Hack assembly translator")
    ap.add_argument("source", help="archivo .vm o directorio con archivos .vm")
    ap.add_argument("-o", "--output", help="archivo .asm de salida (por defecto junto a la entrada)")
    ap.add_argument("--bootstrap", action=argparse.BooleanOptionalAction, default=None,
                    help="emitir SP=256 y call Sys.init 0 (por defecto: si existe Sys.vm)")
    ap.add_argument("--no-comments", action="store_true",
                    help="no anotar cada bloque con la instrucción VM de origen")
    ap.add_argument("-v", "--verbose", action="store_true", help="mensajes de progreso")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        files = collect_sources(args.source)
        sources = [(f.stem, f.read_text(encoding="utf-8")) for f in files]
    except (OSError, ValueError) as ex:
        print(f"ERROR: no pude leer {args.source}: {ex}", file=sys.stderr)
        return 2

    bootstrap = args.bootstrap if args.bootstrap is not None else wants_bootstrap(files)
    LOGGER.debug("fuentes: %s (bootstrap=%s)", [f.name for f in files], bootstrap)

    try:
        program = translate_sources(sources, bootstrap=bootstrap, annotate=not args.no_comments)
    except TranslationError as ex:
        print(ex.diagnostic, file=sys.stderr)
        return 1

    out_path = Path(args.output) if args.output else default_output(args.source)
    try:
        write_asm(program.lines, str(out_path))
    except OSError as ex:
        print(f"ERROR al escribir salida: {ex}", file=sys.stderr)
        return 3

    print(f"OK: {len(files)} archivo(s), {len(program)} líneas → {out_path}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
