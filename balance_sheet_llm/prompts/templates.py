# balance_sheet_llm/prompts/templates.py
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping

ANALYSIS_HEADER = (
    "Analyze this balance sheet and answer the following questions. "
    "Provide concise explanations:"
)

# Prefixed to the user message for chat-completion providers.
ANALYST_PERSONA = "You are a precise analyzer of financial reports. "

PROMPT_TEMPLATE = """{header}

{questions}

Report content:
{document_text}"""


# name -> (label shown in the UI, prompt sent to the model, enabled by default)
QUESTION_TOGGLES: Dict[str, Dict[str, object]] = {
    "run_all_ratios": {
        "label": "Run All Ratios",
        "prompt": (
            "Calculate all financial ratios that are possible from the provided data. "
            "Present the results as a table."
        ),
        "default": True,
    },
}


def default_toggles() -> Dict[str, bool]:
    return {name: bool(spec["default"]) for name, spec in QUESTION_TOGGLES.items()}


def prompts_for(toggles: Mapping[str, bool]) -> List[str]:
    """
    Question prompts for the enabled toggles, in QUESTION_TOGGLES order.
    Unknown toggle names are ignored.
    """
    return [
        str(spec["prompt"])
        for name, spec in QUESTION_TOGGLES.items()
        if toggles.get(name)
    ]


def build_prompt(document_text: str, prompts: Iterable[str]) -> str:
    """
    Combine the fixed instruction header, the question prompts (one per line)
    and the extracted document text into the single prompt sent to a provider.
    """
    return PROMPT_TEMPLATE.format(
        header=ANALYSIS_HEADER,
        questions="\n".join(prompts),
        document_text=document_text,
    )
