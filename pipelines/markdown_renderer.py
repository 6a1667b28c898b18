"""Markdown to HTML renderer for post bodies.

Handles a small, line-oriented Markdown dialect: headings, block quotes,
images, links, bold and emphasis, unordered lists, fenced code and inline
code. Each rule is a global regex substitution applied in a fixed order on
the output of the previous one; the result is then split into lines and
every line that is not already block-level HTML is wrapped in a paragraph.

The renderer trusts its input. Nothing is escaped, so the output must only
be produced from reviewed content.

Multi-line block constructs are not supported: a list item or block quote
that continues on the next line, and every line of a multi-line code block
after the first, are rendered as separate paragraphs.
"""

import re
from typing import List, Tuple

IMAGE_CLASSES = "rounded-lg my-6 w-full h-auto object-cover"
CODE_BLOCK_CLASSES = "bg-gray-800 p-4 rounded-md my-4 overflow-x-auto"
PARAGRAPH_OPEN = '<p class="my-4">'

BLOCK_PREFIXES = ('<h', '<ul', '</ul>', '<li', '<blockquote>', '<pre', '<img')


# Order matters: later rules see the output of earlier ones.
RULES: List[Tuple[re.Pattern, str]] = [
    (re.compile(r'^# (.*)$', re.MULTILINE), r'<h1>\1</h1>'),
    (re.compile(r'^## (.*)$', re.MULTILINE), r'<h2>\1</h2>'),
    (re.compile(r'^### (.*)$', re.MULTILINE), r'<h3>\1</h3>'),
    (re.compile(r'^> (.*)$', re.MULTILINE), r'<blockquote>\1</blockquote>'),
    (re.compile(r'!\[(.*?)\]\((.*?)\)'),
     rf"<img alt='\1' src='\2' class='{IMAGE_CLASSES}' />"),
    (re.compile(r'\[(.*?)\]\((.*?)\)'),
     r"<a href='\2' target='_blank' rel='noopener noreferrer'>\1</a>"),
    (re.compile(r'\*\*(.+?)\*\*'), r'<strong>\1</strong>'),
    (re.compile(r'\*(?!\s)(.+?)\*'), r'<em>\1</em>'),
    (re.compile(r'^\s*[-*] (.*)', re.MULTILINE), '<ul>\n<li>\\1</li>\n</ul>'),
    (re.compile(r'</ul>\n<ul>'), ''),
    (re.compile(r'```(\w+)?\n([\s\S]*?)\n```'),
     rf"<pre class='{CODE_BLOCK_CLASSES}'><code>\2</code></pre>"),
    (re.compile(r'`([^`]+)`'), r'<code>\1</code>'),
]


def _wrap_line(line: str) -> str:
    if line.strip() == '' or line.startswith(BLOCK_PREFIXES):
        return line
    return f"{PARAGRAPH_OPEN}{line}</p>"


def render_markdown(text: str) -> str:
    """Render Markdown source to an HTML fragment.

    Total over all strings: unsupported syntax comes out as paragraph text.
    """
    html = text.replace('\r\n', '\n')
    for pattern, replacement in RULES:
        html = pattern.sub(replacement, html)
    return ''.join(_wrap_line(line) for line in html.split('\n'))
