"""
Document Assembler
Merges the three artifacts into one self-contained, previewable document.
"""

import re

from design_prototype.agents.models import GeneratedArtifacts


STYLE_BLOCK = re.compile(r"<style[\s>]", re.IGNORECASE)
SCRIPT_BLOCK = re.compile(r"<script[\s>]", re.IGNORECASE)
HEAD_CLOSE = re.compile(r"</head\s*>", re.IGNORECASE)
BODY_CLOSE = re.compile(r"</body\s*>", re.IGNORECASE)
DOCUMENT_TAG = re.compile(r"<(html|body)[\s>]", re.IGNORECASE)

FRAGMENT_DOCUMENT = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
</head>
<body>
{body}
</body>
</html>"""

PLACEHOLDER_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Generated Preview</title>
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            margin: 0;
            padding: 20px;
            background-color: #f8fafc;
        }
        .preview-placeholder {
            display: flex;
            align-items: center;
            justify-content: center;
            height: 100vh;
            color: #64748b;
            font-size: 18px;
            text-align: center;
        }
    </style>
</head>
<body>
    <div class="preview-placeholder">
        <div>
            <h2>Preview</h2>
            <p>Describe a page or design a wireframe,<br>then generate code to see it here.</p>
        </div>
    </div>
</body>
</html>
"""


def _insert_before(pattern: re.Pattern, html: str, block: str) -> str:
    """Insert block before the first anchor match. No anchor, no change."""
    return pattern.sub(lambda m: block + m.group(0), html, count=1)


def ensure_document(html: str) -> str:
    """Wrap a bare markup fragment (no <html> or <body> tag) in a document skeleton."""
    if DOCUMENT_TAG.search(html):
        return html
    return FRAGMENT_DOCUMENT.format(body=html)


def assemble_document(artifacts: GeneratedArtifacts) -> str:
    """
    Assemble html, css and javascript into one document.

    Returns "" while the html artifact is still the untouched placeholder.
    css goes before </head> and javascript before </body>, each only when the
    html artifact itself has no block of that kind, so assembling twice
    changes nothing and injected css never suppresses the script.
    """
    if artifacts.is_placeholder:
        return ""

    html = ensure_document(artifacts.html)
    has_style = STYLE_BLOCK.search(html) is not None
    has_script = SCRIPT_BLOCK.search(html) is not None

    if artifacts.css and not has_style:
        html = _insert_before(HEAD_CLOSE, html, f"<style>{artifacts.css}</style>")

    if artifacts.javascript and not has_script:
        html = _insert_before(BODY_CLOSE, html, f"<script>{artifacts.javascript}</script>")

    return html


def preview_document(artifacts: GeneratedArtifacts) -> str:
    """Assembled document, or the static placeholder page when nothing is generated."""
    return assemble_document(artifacts) or PLACEHOLDER_PAGE
