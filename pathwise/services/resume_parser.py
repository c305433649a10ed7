"""
Resume ingestion: text extraction from PDF / Word files and heuristic
section partitioning.
"""
import io
import logging
import re
from typing import Dict, List, Optional, Union

import docx  # python-docx
import fitz  # pymupdf

from pathwise.schemas.resume_review import ParsedResume, ResumeMetadata

logger = logging.getLogger(__name__)

SUPPORTED_FILE_TYPES = ("pdf", "doc", "docx")


class ResumeParseError(Exception):
    """The uploaded file could not be read as a resume."""


# ============================================
# Section partitioning
# ============================================

# Ordered: the first matching pattern names the section
SECTION_PATTERNS = [
    ("contact", re.compile(r"^(contact|personal\s+information|contact\s+information)\b", re.I)),
    ("summary", re.compile(r"^(summary|profile|objective|professional\s+summary|career\s+objective|about)\b", re.I)),
    ("experience", re.compile(r"^(experience|work\s+experience|professional\s+experience|employment|career\s+history)\b", re.I)),
    ("education", re.compile(r"^(education|academic\s+background|qualifications|academic\s+qualifications)\b", re.I)),
    ("skills", re.compile(r"^(skills|technical\s+skills|core\s+competencies|expertise|proficiencies)\b", re.I)),
    ("projects", re.compile(r"^(projects|personal\s+projects|key\s+projects|notable\s+projects)\b", re.I)),
    ("certifications", re.compile(r"^(certifications|certificates|licenses|credentials)\b", re.I)),
]

SECTION_HEADERS = {
    "contact": "Contact",
    "summary": "Summary",
    "experience": "Experience",
    "education": "Education",
    "skills": "Skills",
    "projects": "Projects",
    "certifications": "Certifications",
}

MAX_HEADER_WORDS = 5
_INLINE_CONTENT_RE = re.compile(r":\s*\S")

CONTACT_PATTERNS = [
    re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),  # email
    re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b"),  # phone
    re.compile(r"\b(?:linkedin\.com|github\.com|twitter\.com)\b", re.I),
    re.compile(r"\b\d+\s+[A-Za-z\s]+(?:Street|St|Avenue|Ave|Road|Rd|Drive|Dr|Lane|Ln|Boulevard|Blvd)\b", re.I),
]


def detect_section_header(line: str) -> Optional[str]:
    """
    Return the section name if `line` is a section header, else None.

    A header is short and carries no inline content, so "Skills" and
    "Technical Skills:" are headers while "Skills: Python, SQL" is not.
    """
    if len(line.split()) > MAX_HEADER_WORDS:
        return None
    if _INLINE_CONTENT_RE.search(line):
        return None
    for name, pattern in SECTION_PATTERNS:
        if pattern.match(line):
            return name
    return None


def is_contact_info(line: str) -> bool:
    return any(pattern.search(line) for pattern in CONTACT_PATTERNS)


def _clean_lines(text: str) -> List[str]:
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def extract_sections(text: str) -> Dict[str, str]:
    """
    Partition resume text into named sections in one pass.

    Lines before the first header land in "other". A header seen twice
    appends to the content collected under its first occurrence. Without
    a contact header, contact details are taken from the top of "other"
    only, which reconstruct_text() always emits first and unchanged.
    """
    lines = _clean_lines(text)
    collected: Dict[str, List[str]] = {}
    current = "other"

    for line in lines:
        header = detect_section_header(line)
        if header:
            current = header
            continue
        collected.setdefault(current, []).append(line)

    sections = {name: "\n".join(content) for name, content in collected.items() if content}

    if "contact" not in sections:
        contact_lines = [line for line in collected.get("other", [])[:5] if is_contact_info(line)]
        if contact_lines:
            sections["contact"] = "\n".join(contact_lines)

    return sections


def reconstruct_text(sections: Dict[str, str]) -> str:
    """Render sections back to text under canonical headers, "other" first."""
    parts = []
    if sections.get("other"):
        parts.append(sections["other"])
    for name, header in SECTION_HEADERS.items():
        content = sections.get(name)
        if content:
            parts.append(f"{header}\n{content}")
    return "\n".join(parts)


# ============================================
# Text extraction
# ============================================

def count_words(text: str) -> int:
    return len(text.split())


def detect_formatting(text: str) -> bool:
    """True when more than 30% of non-empty lines are short (list-like layout)."""
    lines = _clean_lines(text)
    if not lines:
        return False
    short = [line for line in lines if len(line) < 50]
    return len(short) / len(lines) > 0.3


def _read_pdf(data: bytes) -> tuple:
    with fitz.open(stream=data, filetype="pdf") as doc:
        text = "\n".join(page.get_text() for page in doc)
        return text, doc.page_count


def _read_word(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    lines = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            for cell in row.cells:
                if cell.text.strip():
                    lines.append(cell.text)
    return "\n".join(lines)


def parse_resume(source: Union[bytes, str], file_type: str) -> ParsedResume:
    """
    Extract text, sections and metadata from a resume file.

    Args:
        source: Raw file bytes, or a path to the stored file
        file_type: "pdf", "doc" or "docx"

    Raises:
        ResumeParseError: unsupported type or unreadable file
    """
    file_type = (file_type or "").lower().lstrip(".")
    if file_type not in SUPPORTED_FILE_TYPES:
        raise ResumeParseError(f"Unsupported file type: {file_type}")

    if isinstance(source, str):
        try:
            with open(source, "rb") as f:
                data = f.read()
        except OSError as e:
            raise ResumeParseError(f"Failed to parse resume: {e}") from e
    else:
        data = source

    page_count = None
    try:
        if file_type == "pdf":
            text, page_count = _read_pdf(data)
        else:
            # legacy .doc goes through the same reader and fails if it is not OOXML
            text = _read_word(data)
    except Exception as e:
        logger.warning(f"Resume parsing failed ({file_type}): {e}")
        raise ResumeParseError(f"Failed to parse resume: {e}") from e

    text = text.strip()
    return ParsedResume(
        text=text,
        sections=extract_sections(text),
        metadata=ResumeMetadata(
            word_count=count_words(text),
            page_count=page_count,
            has_formatting=detect_formatting(text),
        ),
    )


# ============================================
# Extractors used by the heuristic analysis
# ============================================

SKILL_PATTERNS = [
    # Programming languages
    re.compile(r"(?<![\w+#])(?:JavaScript|TypeScript|Python|Java|C\+\+|C#|PHP|Ruby|Go|Rust|Swift|Kotlin|Scala|R|MATLAB|SQL|HTML|CSS)(?![\w+#])", re.I),
    # Frameworks and libraries
    re.compile(r"\b(?:React|Angular|Vue|Node\.js|Express|Django|Flask|FastAPI|Spring|Laravel|Rails|jQuery|Bootstrap|Tailwind)\b", re.I),
    # Databases
    re.compile(r"\b(?:MySQL|PostgreSQL|MongoDB|Redis|SQLite|Oracle|SQL Server|DynamoDB|Cassandra|Neo4j)\b", re.I),
    # Cloud and DevOps
    re.compile(r"\b(?:AWS|Azure|GCP|Docker|Kubernetes|Jenkins|GitLab|GitHub|Terraform|Ansible|Chef|Puppet)\b", re.I),
    # Tools
    re.compile(r"\b(?:Git|Jira|Confluence|Slack|Figma|Adobe|Photoshop|Illustrator|Sketch|InVision|Tableau|Power BI)\b", re.I),
    # Methodologies
    re.compile(r"\b(?:Agile|Scrum|Kanban|DevOps|CI/CD|TDD|BDD|Microservices|REST|GraphQL|API)(?!\w)", re.I),
]

JOB_TITLE_PATTERNS = [
    re.compile(r"\b(?:Manager|Director|Engineer|Developer|Analyst|Specialist|Coordinator|Assistant|Lead|Senior|Junior)\b", re.I),
    re.compile(r"\b(?:at|@)\s+[A-Z][A-Za-z\s&]+$"),  # "Position at Company"
    re.compile(r"^\s*[A-Z][A-Za-z\s]+(,|\s+\|\s+|\s+-\s+)[A-Z][A-Za-z\s&]+"),  # "Position, Company"
]

ACHIEVEMENT_PATTERNS = [
    re.compile(r"^\s*[•·▪▫◦‣⁃]\s+"),
    re.compile(r"^\s*[-*]\s+"),
    re.compile(r"^\s*\d+[.)]\s+"),
    re.compile(r"^(?:Achieved|Improved|Increased|Decreased|Reduced|Developed|Implemented|Led|Managed|Created|Built|Designed|Optimized)", re.I),
]

QUANTIFIED_PATTERNS = [
    re.compile(r"\b\d+%"),
    re.compile(r"\$[\d,]+(?:\.\d{2})?\b"),
    re.compile(r"\b\d+(?:,\d{3})*\s+(?:users|customers|clients|employees|projects|hours|days|months|years)\b", re.I),
    re.compile(r"\b(?:increased|decreased|improved|reduced|saved|generated|grew)\s+(?:by\s+)?\d+", re.I),
]

ACTION_VERBS = [
    "achieved", "administered", "analyzed", "built", "collaborated", "created", "delivered",
    "developed", "directed", "established", "executed", "generated", "implemented", "improved",
    "increased", "initiated", "launched", "led", "managed", "optimized", "organized",
    "planned", "produced", "reduced", "resolved", "streamlined", "supervised", "trained",
]

_YEARS_RE = re.compile(r"(\d+)\+?\s*(?:years?|yrs?)", re.I)


def extract_skills(text: str) -> List[str]:
    """Technology keywords found in the text, first spelling wins, in order of discovery."""
    seen = {}
    for pattern in SKILL_PATTERNS:
        for match in pattern.findall(text or ""):
            key = match.lower()
            if key not in seen:
                seen[key] = match
    return list(seen.values())


def is_job_title(line: str) -> bool:
    return any(pattern.search(line) for pattern in JOB_TITLE_PATTERNS)


def is_achievement(line: str) -> bool:
    return any(pattern.search(line) for pattern in ACHIEVEMENT_PATTERNS)


def extract_experience(experience_section: str) -> List[dict]:
    """Group experience lines into {title, description, achievements} entries."""
    entries = []
    current = None
    for line in _clean_lines(experience_section):
        if is_job_title(line) and not is_achievement(line):
            if current:
                entries.append(current)
            current = {"title": line, "description": [], "achievements": []}
        elif current:
            if is_achievement(line):
                current["achievements"].append(line)
            else:
                current["description"].append(line)
    if current:
        entries.append(current)
    return entries


def extract_quantified_achievements(text: str) -> List[str]:
    found = []
    for pattern in QUANTIFIED_PATTERNS:
        found.extend(pattern.findall(text or ""))
    return found


def extract_action_verbs(text: str) -> List[str]:
    words = set(re.findall(r"[a-z]+", (text or "").lower()))
    return [
        verb for verb in ACTION_VERBS
        if verb in words or verb + "d" in words or verb + "ed" in words
    ]


def estimate_experience_years(text: str, experience_section: str = "") -> float:
    """
    Largest "N years" figure mentioned; otherwise two years per job entry,
    capped at 15.
    """
    mentions = [int(value) for value in _YEARS_RE.findall(text or "")]
    if mentions:
        return float(min(max(mentions), 50))
    jobs = extract_experience(experience_section)
    return float(min(len(jobs) * 2, 15))
