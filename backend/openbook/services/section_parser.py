"""
Section markers inside page markdown.

A section is stored as

    <!-- SECTION:{id}:{title} -->
    {content}
    <!-- END_SECTION:{id} -->

Pages are edited as a list of Section records and written back with
serialize_sections(), never by patching the raw text in place.
"""
import re
import uuid
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

MAIN_SECTION_ID = "main-content"
MAIN_SECTION_TITLE = "Main Content"

SECTION_PATTERN = re.compile(
    r"<!-- SECTION:([^:\s]+):([\s\S]*?)\s*-->([\s\S]*?)<!-- END_SECTION:\1 -->"
)
SECTION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
MARKER_PATTERN = re.compile(r"<!--\s*(?:END_)?SECTION:")
BLOCK_SEPARATOR = "\n\n"


class SectionError(ValueError):
    """Raised for an invalid section id, title or ordering"""


class SectionNotFoundError(SectionError):
    pass


@dataclass
class Section:
    id: str
    title: str
    content: str
    # Implicit sections come from text outside any marker and serialize as plain text
    explicit: bool = True

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "explicit": self.explicit,
        }


def generate_section_id() -> str:
    return f"sec-{uuid.uuid4().hex[:7]}"


def validate_section_id(section_id: str):
    if not section_id or not SECTION_ID_PATTERN.match(section_id):
        raise SectionError(f"Invalid section id '{section_id}'")


def validate_section_title(title: str) -> str:
    title = (title or "").strip()
    if not title:
        raise SectionError("Section title is required")
    if "\n" in title or "\r" in title or "-->" in title:
        raise SectionError("Section title cannot contain line breaks or '-->'")
    return title


def validate_section_body(body: Optional[str]) -> str:
    body = body or ""
    if MARKER_PATTERN.search(body):
        raise SectionError("Section content cannot contain section markers")
    return body


def _marker_body(raw: str) -> str:
    # Drop only the line breaks serialize_section puts next to the markers
    if raw.startswith("\n"):
        raw = raw[1:]
    if raw.endswith("\n"):
        raw = raw[:-1]
    return raw


def _append(section: Section, text: str):
    section.content = f"{section.content}{BLOCK_SEPARATOR}{text}" if section.content else text


def parse_sections(content: str) -> List[Section]:
    """Split page markdown into sections, keeping every piece of text"""
    content = content or ""
    matches = list(SECTION_PATTERN.finditer(content))

    if not matches:
        # Kept raw so that an unmarked page serializes back unchanged
        return [Section(MAIN_SECTION_ID, MAIN_SECTION_TITLE, content, explicit=False)]

    sections: List[Section] = []
    leading = content[:matches[0].start()]
    if leading.strip():
        sections.append(Section(MAIN_SECTION_ID, MAIN_SECTION_TITLE, leading.strip("\n"), explicit=False))

    for index, match in enumerate(matches):
        sections.append(Section(match.group(1), match.group(2).strip(), _marker_body(match.group(3))))

        end = matches[index + 1].start() if index + 1 < len(matches) else len(content)
        between = content[match.end():end]
        if between.strip():
            _append(sections[-1], between.strip("\n"))

    return sections


def serialize_section(section: Section) -> str:
    if not section.explicit:
        return section.content
    return (
        f"<!-- SECTION:{section.id}:{section.title} -->\n"
        f"{section.content}\n"
        f"<!-- END_SECTION:{section.id} -->"
    )


def serialize_sections(sections: List[Section]) -> str:
    """Inverse of parse_sections"""
    return BLOCK_SEPARATOR.join(serialize_section(section) for section in sections)


def find_section(sections: List[Section], section_id: str) -> Tuple[int, Section]:
    for index, section in enumerate(sections):
        if section.id == section_id:
            return index, section
    raise SectionNotFoundError(f"Section '{section_id}' not found")


def rename_section(content: str, section_id: str, new_title: str) -> str:
    """Change only the title of one section"""
    title = validate_section_title(new_title)
    sections = parse_sections(content)
    index, section = find_section(sections, section_id)
    sections[index] = replace(section, title=title, explicit=True)
    return serialize_sections(sections)


def update_section(content: str, section_id: str, new_content: str,
                   new_title: Optional[str] = None) -> str:
    sections = parse_sections(content)
    index, section = find_section(sections, section_id)
    updated = replace(section, content=validate_section_body(new_content))
    if new_title is not None:
        updated = replace(updated, title=validate_section_title(new_title), explicit=True)
    sections[index] = updated
    return serialize_sections(sections)


def add_section(content: str, title: str, body: str = "",
                section_id: Optional[str] = None) -> Tuple[str, Section]:
    """Append a new explicit section, returning the new content and the section"""
    title = validate_section_title(title)
    body = validate_section_body(body)
    sections = parse_sections(content)
    existing = {section.id for section in sections}

    if section_id is None:
        section_id = generate_section_id()
        while section_id in existing:
            section_id = generate_section_id()
    else:
        validate_section_id(section_id)
        if section_id in existing:
            raise SectionError(f"Section '{section_id}' already exists")

    # An empty unmarked page has nothing to keep
    if len(sections) == 1 and not sections[0].explicit and not sections[0].content.strip():
        sections = []

    section = Section(section_id, title, body)
    sections.append(section)
    return serialize_sections(sections), section


def delete_section(content: str, section_id: str) -> str:
    sections = parse_sections(content)
    index, _ = find_section(sections, section_id)
    del sections[index]
    return serialize_sections(sections)


def reorder_sections(content: str, order: List[str]) -> str:
    """Rewrite the page with its sections in the given id order"""
    sections = parse_sections(content)
    by_id = {section.id: section for section in sections}
    if len(order) != len(sections) or set(order) != set(by_id):
        raise SectionError("Order must list every section id exactly once")

    reordered = []
    for position, section_id in enumerate(order):
        section = by_id[section_id]
        # Only leading text parses back as the implicit section
        if position > 0 and not section.explicit:
            section = replace(section, explicit=True)
        reordered.append(section)
    return serialize_sections(reordered)
