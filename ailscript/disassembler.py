"""Plain-text disassembly view of a decoded instruction stream.

The listing is a derived artefact meant for reading in an editor next to a
hex dump; nothing consumes it back.
"""

from __future__ import annotations

import json
from typing import Iterable, List, Sequence

from .expression import format_expression
from .image import ScriptImage, Label
from .ir import Expression, FunctionCall, Instruction, Operand, RawField, StringRef, SwitchTable


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\r", "\\r").replace("\n", "\\n").replace('"', '\\"')


def _operand_lines(address: int, operand: Operand) -> List[str]:
    prefix = f"{address:08X} | ;"
    if isinstance(operand, Expression):
        return [f"{prefix} expr {format_expression(operand)}"]
    if isinstance(operand, StringRef):
        return [f'{prefix} ref 0x{operand.offset:04X} "{_escape(operand.text)}"']
    if isinstance(operand, RawField):
        width = operand.width * 2
        if operand.name == "target":
            return [f"{prefix} target L_{operand.value:04X}"]
        return [f"{prefix} {operand.name} 0x{operand.value:0{width}X}"]
    if isinstance(operand, SwitchTable):
        lines = [f"{prefix} default L_{operand.default_addr:04X}", f"{prefix} count {len(operand.cases)}"]
        lines.extend(f"{prefix} case 0x{case_id:02X} L_{addr:04X}" for case_id, addr in operand.cases)
        return lines
    if isinstance(operand, FunctionCall):
        lines = [f"{operand.address:08X} | {operand.mnemonic}"]
        for nested in operand.operands:
            lines.extend(_operand_lines(operand.address, nested))
        return lines
    raise TypeError(f"Unsupported operand type: {type(operand)!r}")


def render_instruction(instruction: Instruction) -> List[str]:
    """Return the listing lines for one instruction."""

    lines = [f"{instruction.address:08X} | {instruction.mnemonic}"]
    for operand in instruction.operands:
        lines.extend(_operand_lines(instruction.address, operand))
    return lines


def render_labels(labels: Sequence[Label]) -> List[str]:
    return [f"; label {index:04d} 0x{first:04X} 0x{second:04X}" for index, (first, second) in enumerate(labels)]


def render(
    instructions: Iterable[Instruction],
    *,
    image: ScriptImage | None = None,
    version: str | None = None,
) -> str:
    """Render a full listing, optionally preceded by section information."""

    lines: List[str] = []
    if image is not None:
        lines.append(f"; code 0x{image.code_base:08X} size 0x{len(image.code):04X}")
        lines.append(f"; pool size 0x{len(image.pool):04X}")
        if version:
            lines.append(f"; version {version}")
        lines.extend(render_labels(image.labels))
        lines.append("")
    for instruction in instructions:
        lines.extend(render_instruction(instruction))
    return "\n".join(lines) + "\n"


def render_json(instructions: Iterable[Instruction]) -> str:
    return json.dumps([instruction.as_dict() for instruction in instructions], indent=2, ensure_ascii=False)


__all__ = ["render", "render_instruction", "render_json", "render_labels"]
