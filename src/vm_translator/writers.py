from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List


@dataclass
class AsmProgram:
    """Buffer de líneas de ensamblador; el CodeWriter es su único escritor."""
    lines: List[str] = field(default_factory=list)

    def add(self, *instructions: str) -> None:
        self.lines.extend(instructions)

    def label(self, name: str) -> None:
        self.lines.append(f"({name})")

    def comment(self, text: str) -> None:
        self.lines.append(f"// {text}")

    def text(self) -> str:
        return to_asm_text(self.lines)

    def __len__(self) -> int:
        return len(self.lines)


def to_asm_text(lines: Iterable[str]) -> str:
    return "".join(line + "\n" for line in lines)

def write_asm(lines: Iterable[str], path: str) -> None:
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        for line in lines:
            f.write(line + "\n")
