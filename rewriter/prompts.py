"""
Prompt assembly for the Rewriter service.

The request is a flat list of labelled parts:

    instruction: <prompt>        (only when an instruction is set)
    input: <example input>       (one pair per example, in order)
    output: <example output>
    input: <selected text>
    output:                      (left empty for the model to complete)
"""
from .schemas import EffectiveConfig, RewriteRequest, RequestPayload


INSTRUCTION_LABEL = "instruction: "
INPUT_LABEL = "input: "
OUTPUT_LABEL = "output: "


def get_active_instruction(config: EffectiveConfig, request: RewriteRequest) -> str:
    """Per-request prompt if given, else the configured one."""
    return request.prompt or config.prompt


def assemble_request(config: EffectiveConfig, request: RewriteRequest) -> RequestPayload:
    """Build the ordered request parts. No length or content checks."""
    parts = []

    instruction = get_active_instruction(config, request)
    if instruction:
        parts.append(f"{INSTRUCTION_LABEL}{instruction}")

    for example_input, example_output in config.examples.items():
        parts.append(f"{INPUT_LABEL}{example_input}")
        parts.append(f"{OUTPUT_LABEL}{example_output}")

    parts.append(f"{INPUT_LABEL}{request.text}")
    parts.append(OUTPUT_LABEL)

    return RequestPayload(parts=parts)
