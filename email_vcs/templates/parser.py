"""Converts markdown template documents to and from template records.

A template document is a sequence of sections, each introduced by a header
line such as ``# Subject`` or ``# From Email``. Sections are located
independently of one another, so they may appear in any order and may be
left blank. Only the ``Labels`` section is mandatory.
"""

import re

import structlog

from email_vcs.schemas.template import TemplateRecord

from .exceptions import ParseError

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

SECTION_HEADER_PATTERN = re.compile(
    r"^#[ \t]+(?P<name>Subject|Html|Text|Labels|From[ \t]+Email|From[ \t]+Name)[ \t]*\r?$",
    re.IGNORECASE | re.MULTILINE,
)
"""Pattern matching a recognized section header line."""

SECTION_FIELDS: dict[str, str] = {
    "Subject": "subject",
    "Html": "html",
    "Text": "text",
    "Labels": "labels",
    "From Email": "from_email",
    "From Name": "from_name",
}
"""Canonical section names, in document order, mapped to template record fields."""

LABEL_MARKER = "* "


def _canonical_section_name(raw_name: str) -> str:
    """Map a header name as written in a document to its canonical spelling."""
    collapsed = " ".join(raw_name.split()).lower()
    for name in SECTION_FIELDS:
        if name.lower() == collapsed:
            return name
    raise ValueError(f"Unrecognized section name: {raw_name}")


def extract_sections(content: str) -> dict[str, str]:
    """Extract the trimmed content of every section present in a document.

    Only the first occurrence of each section is kept. A section runs until
    the next recognized header line or the end of the document.
    """
    headers = list(SECTION_HEADER_PATTERN.finditer(content))
    sections: dict[str, str] = {}
    for index, header in enumerate(headers):
        name = _canonical_section_name(header.group("name"))
        if name in sections:
            continue
        end = headers[index + 1].start() if index + 1 < len(headers) else len(content)
        sections[name] = content[header.end() : end].strip()
    return sections


def parse_labels(content: str) -> list[str]:
    """Convert the content of a Labels section into a list of labels."""
    labels: list[str] = []
    for line in content.splitlines():
        label = line.strip()
        if label.startswith(LABEL_MARKER):
            label = label[len(LABEL_MARKER) :].strip()
        if label:
            labels.append(label)
    return labels


def parse_markdown(content: str) -> TemplateRecord:
    """Parse a markdown template document into a template record.

    Args:
        content: Raw markdown text of the template.

    Raises:
        ParseError: If the document has no Labels section.

    Returns:
        TemplateRecord: The parsed template. Sections missing from the
        document are left as None.
    """
    sections = extract_sections(content)
    if "Labels" not in sections:
        raise ParseError("Template is missing the required '# Labels' section")

    fields: dict[str, str | list[str]] = {}
    for name, value in sections.items():
        if name == "Labels":
            fields[SECTION_FIELDS[name]] = parse_labels(value)
        else:
            fields[SECTION_FIELDS[name]] = value
    record = TemplateRecord.model_validate(fields)
    logger.debug("Parsed markdown template", sections=list(sections), label_count=len(record.labels))
    return record


def render_markdown(record: TemplateRecord) -> str:
    """Render a template record as a markdown template document.

    Absent sections are omitted, so parsing the output gives back an equal record.
    """
    blocks: list[str] = []
    for name, field in SECTION_FIELDS.items():
        if name == "Labels":
            body = "\n".join(f"{LABEL_MARKER}{label}" for label in record.labels)
        else:
            value = getattr(record, field)
            if value is None:
                continue
            body = value
        blocks.append(f"# {name}\n{body}".rstrip() + "\n")
    return "\n".join(blocks)
