IMPROVE_BULLET_TEMPLATE = """You are a professional resume writer. Rewrite the resume bullet point below so it is more impactful, specific and professional.

Follow the X-Y-Z formula: "Accomplished [X] by doing [Y], resulting in [Z]". Add a concrete metric (percentage, time, money or volume) where one is plausible. Start with a strong action verb and keep it to a single line.

Return only the rewritten bullet point, with no label, quotes or explanation.

Original: {text}

Improved:"""


def build_prompt(text: str) -> str:
    return IMPROVE_BULLET_TEMPLATE.format(text=text)
