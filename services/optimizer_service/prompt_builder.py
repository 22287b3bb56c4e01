"""
Prompt building.

A meta-prompt is a fixed template containing the ``{{input}}`` placeholder.
The user's text is substituted verbatim; on the V2 path a block of
natural-language instructions derived from the request options is appended.
The upstream model is expected to honour those lines by convention only.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from shared.contracts.optimizer import DEFAULT_LANGUAGE, OptimizeRequestV2

PLACEHOLDER = "{{input}}"
PROMPTS_DIR = Path(__file__).parent / "prompts"

_REQUIREMENTS_HEADER = "\n\n**Additional requirements:**\n"


@dataclass(frozen=True)
class MetaPrompts:
    v1: str
    v2: str


def load_meta_prompts(directory: Path | None = None) -> MetaPrompts:
    """Read the V1 and V2 meta-prompts. Raises OSError if either is missing."""
    directory = directory or PROMPTS_DIR
    return MetaPrompts(
        v1=(directory / "prompt.txt").read_text(encoding="utf-8"),
        v2=(directory / "prompt-v2.txt").read_text(encoding="utf-8"),
    )


def instruction_lines(options: OptimizeRequestV2) -> list[str]:
    """Instruction lines for the populated options, in fixed order."""
    lines: list[str] = []

    if options.language and options.language != DEFAULT_LANGUAGE:
        lines.append(f"Please reply in {options.language}")

    if options.target_models:
        lines.append(
            "Generate specialised versions for the following AI models: "
            + ", ".join(options.target_models)
        )

    if options.complexity_level:
        lines.append(f"Complexity level: {options.complexity_level}")

    if options.task_type:
        lines.append(f"Task type: {options.task_type}")

    if options.generate_multi:
        lines.append("Generate specialised versions for multiple AI models")

    return lines


def build(template: str, user_input: str, options: OptimizeRequestV2 | None = None) -> str:
    prompt = template.replace(PLACEHOLDER, user_input)
    if options is None:
        return prompt

    lines = instruction_lines(options)
    if not lines:
        return prompt

    return prompt + _REQUIREMENTS_HEADER + "".join(f"- {line}\n" for line in lines)
