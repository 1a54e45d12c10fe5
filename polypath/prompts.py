from typing import Dict, List

SYSTEM_PROMPT = (
    "You are a language learning assistant. "
    "Always respond with valid JSON only (no markdown, no code fences, no prose)."
)


def build_user_prompt(l1: str, tl: str, theme: str, count: int) -> str:
    return (
        f"Generate exactly {count} common {theme} words.\n\n"
        "Return a JSON object with this exact structure:\n"
        "{\n"
        '  "words": [\n'
        f'    {{"native": "{l1} word", "target": "{tl} translation"}},\n'
        f'    {{"native": "{l1} word", "target": "{tl} translation"}}\n'
        "  ]\n"
        "}\n\n"
        "Requirements:\n"
        f"- Provide exactly {count} word pairs\n"
        "- Use common, useful vocabulary appropriate for A1-A2 level learners\n"
        "- Words should be single words or simple phrases (no sentences)\n"
        "- Ensure translations are accurate\n"
        "- Return only valid JSON, no additional text\n\n"
        f"Source language: {l1}\n"
        f"Target language: {tl}\n"
        f"Theme: {theme}"
    )


def build_messages(l1: str, tl: str, theme: str, count: int) -> List[Dict[str, str]]:
    """Chat messages asking for `count` {native, target} pairs as strict JSON."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(l1, tl, theme, count)},
    ]
