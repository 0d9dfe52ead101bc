"""
Code Generation Prompts
Instruction text asking the generator for one html/css/javascript JSON object.
"""

# ============================================================================
# Output Contract
# ============================================================================

OUTPUT_FORMAT = """
=== OUTPUT FORMAT ===

Respond with a single JSON object with exactly three keys: "html", "css", and "javascript".
- "html": a full document including <!DOCTYPE html>, <html>, <head>, and <body> tags.
- "css": modern, clean styles for the document.
- "javascript": the behavior code; it will be placed inside a script tag.

IMPORTANT: Respond ONLY with valid JSON, no additional text or explanations.
"""

# ============================================================================
# Mode Instructions
# ============================================================================

TEXT_INSTRUCTIONS = """
=== TASK ===

Create a complete webpage based on the following request:
"""

WIREFRAME_INSTRUCTIONS = """
=== TASK ===

Create a complete webpage based on the wireframe data below.

Wireframe rules:
- Preserve the overall relative layout of the wireframe elements.
- Follow any rule written on an element (its text or its "rules" property).
- Scale elements so that every component in the wireframe is visible on screen.
- Center the wireframe as a whole on the page.
- Fit the page to the canvas size given in the data.
"""


def get_text_prompt(description: str, guidelines: str = "") -> str:
    """
    Build the prompt for a free-text request.

    Args:
        description: User description, embedded verbatim
        guidelines: Optional display/style guidance placed first

    Returns:
        Complete prompt
    """
    parts = []
    if guidelines:
        parts.append(f"=== GUIDELINES ===\n{guidelines.strip()}")
    parts.append(TEXT_INSTRUCTIONS.strip())
    parts.append(f'"{description}"')
    parts.append(OUTPUT_FORMAT.strip())
    return "\n\n".join(parts)


def get_wireframe_prompt(wireframe_json: str, guidelines: str = "") -> str:
    """
    Build the prompt for a wireframe request.

    Args:
        wireframe_json: Serialized components and canvas size
        guidelines: Optional display/style guidance placed first

    Returns:
        Complete prompt
    """
    parts = []
    if guidelines:
        parts.append(f"=== GUIDELINES ===\n{guidelines.strip()}")
    parts.append(WIREFRAME_INSTRUCTIONS.strip())
    parts.append(f"=== WIREFRAME DATA ===\n{wireframe_json}")
    parts.append(OUTPUT_FORMAT.strip())
    return "\n\n".join(parts)
