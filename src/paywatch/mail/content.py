#!/usr/bin/env python3
"""
Email Content Rendering

Turns notification HTML into line-oriented text so that provider parsers can
scan it the same way they scan plain-text bodies. Block elements end a line;
table cells in the same row are joined with a tab so that a label cell and
its value cell stay on one line.
"""

import re

from bs4 import BeautifulSoup, Comment, NavigableString

BLOCK_TAGS = [
    "address",
    "blockquote",
    "div",
    "dl",
    "dt",
    "dd",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "hr",
    "li",
    "ol",
    "p",
    "pre",
    "table",
    "tr",
    "ul",
]
CELL_TAGS = ["td", "th"]

# Collapse source formatting whitespace only; full-width spaces are content.
_SOURCE_WHITESPACE = re.compile(r"[ \t\r\n\f\v]+")


def html_to_text(html: str) -> str:
    """
    Render an HTML email body as text, one logical line per block.

    Args:
        html: Raw HTML body

    Returns:
        Text with blank lines removed and each line stripped
    """
    soup = BeautifulSoup(html, "lxml")

    for tag in soup(["script", "style", "head"]):
        tag.decompose()
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for node in soup.find_all(string=True):
        if type(node) is not NavigableString:
            continue
        collapsed = _SOURCE_WHITESPACE.sub(" ", str(node))
        if collapsed != node:
            node.replace_with(collapsed)

    for br in soup.find_all("br"):
        br.replace_with("\n")
    for cell in soup.find_all(CELL_TAGS):
        cell.append("\t")
    for block in soup.find_all(BLOCK_TAGS):
        block.append("\n")

    return normalize_lines(soup.get_text())


def normalize_lines(text: str) -> str:
    """Strip every line and drop the empty ones."""
    lines = (line.strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)
