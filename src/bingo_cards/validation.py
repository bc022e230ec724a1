"""Checks applied to uploaded ``.bingoCards`` content before parsing it."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .layout import CELLS
from .models import Game
from .serialize import (
    CARD_PREFIX,
    CARD_SEPARATOR,
    EXTENSION,
    FIELD_SEPARATOR,
    MAX_FIELD_VALUE,
    parse_game,
)

MAX_FILE_SIZE = 5 * 1024 * 1024
MIN_FILE_SIZE = 1
ALLOWED_EXTENSIONS = (EXTENSION,)
ALLOWED_MIME_TYPES = ("text/plain", "application/octet-stream", "")

DANGEROUS_PATTERNS = [
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"<iframe", re.IGNORECASE),
    re.compile(r"<object", re.IGNORECASE),
    re.compile(r"<embed", re.IGNORECASE),
    re.compile(r"data:text/html", re.IGNORECASE),
]

_CARD_NO_RE = re.compile(r"CardNo\.[0-9]+")
_FIELD_RE = re.compile(r"[0-9]+")


class ValidationCode(str, Enum):
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    EMPTY_FILE = "EMPTY_FILE"
    INVALID_FORMAT = "INVALID_FORMAT"
    MALICIOUS_CONTENT = "MALICIOUS_CONTENT"
    INVALID_STRUCTURE = "INVALID_STRUCTURE"
    INVALID_MIME_TYPE = "INVALID_MIME_TYPE"


USER_MESSAGES = {
    ValidationCode.FILE_TOO_LARGE: "Your file is too large. Please use a file smaller than 5MB.",
    ValidationCode.EMPTY_FILE: "This file appears to be empty. Please check your file and try again.",
    ValidationCode.INVALID_FORMAT: "This file format is not supported. Please upload a .bingoCards file.",
    ValidationCode.MALICIOUS_CONTENT: "This file contains suspicious content and cannot be uploaded.",
    ValidationCode.INVALID_STRUCTURE: "This file has an invalid structure. Please check the file format.",
    ValidationCode.INVALID_MIME_TYPE: "Invalid file type. Please upload a .bingoCards file.",
}


@dataclass
class ValidationIssue:
    code: ValidationCode
    message: str
    details: Optional[str] = None


@dataclass
class ValidationResult:
    valid: bool
    issue: Optional[ValidationIssue] = None


OK = ValidationResult(valid=True)


def _fail(code: ValidationCode, message: str, details: Optional[str] = None) -> ValidationResult:
    return ValidationResult(valid=False, issue=ValidationIssue(code, message, details))


class BingoCardsFileError(ValueError):
    def __init__(self, issue: ValidationIssue):
        super().__init__(f"{issue.code.value}: {issue.message}")
        self.issue = issue


def user_message(code: ValidationCode) -> str:
    return USER_MESSAGES.get(code, "An unknown error occurred while validating the file.")


def validate_size(size: int) -> ValidationResult:
    if size > MAX_FILE_SIZE:
        return _fail(
            ValidationCode.FILE_TOO_LARGE,
            "File too large. Maximum size is 5MB",
            f"File size: {size / 1024 / 1024:.2f}MB",
        )
    if size < MIN_FILE_SIZE:
        return _fail(ValidationCode.EMPTY_FILE, "File is empty", f"File size: {size} bytes")
    return OK


def validate_type(name: str, mime_type: str = "") -> ValidationResult:
    dot = name.rfind(".")
    extension = name[dot:] if dot >= 0 else ""
    if extension not in ALLOWED_EXTENSIONS:
        return _fail(
            ValidationCode.INVALID_FORMAT,
            f"Only {EXTENSION} files are allowed",
            f"File extension: {extension}",
        )
    if mime_type not in ALLOWED_MIME_TYPES:
        return _fail(ValidationCode.INVALID_MIME_TYPE, "Invalid file type", f"MIME type: {mime_type}")
    return OK


def validate_content(content: str) -> ValidationResult:
    if not content.startswith(CARD_SEPARATOR + CARD_PREFIX):
        return _fail(
            ValidationCode.INVALID_FORMAT,
            "Invalid file format: Missing CardNo prefix",
            f"File must start with {CARD_SEPARATOR}{CARD_PREFIX}",
        )
    for pattern in DANGEROUS_PATTERNS:
        if pattern.search(content):
            return _fail(
                ValidationCode.MALICIOUS_CONTENT,
                "File contains potentially malicious content",
                f"Matched pattern: {pattern.pattern}",
            )
    return OK


def _valid_card_segment(segment: str) -> bool:
    parts = segment.split(FIELD_SEPARATOR)
    if not _CARD_NO_RE.fullmatch(parts[0]):
        return False
    if len(parts) != CELLS + 1:
        return False
    for part in parts[1:]:
        if part == "":
            continue
        if not _FIELD_RE.fullmatch(part) or int(part) > MAX_FIELD_VALUE:
            return False
    return True


def validate_card_structure(content: str) -> ValidationResult:
    segments = content.split(CARD_SEPARATOR + CARD_PREFIX)[1:]
    if not segments:
        return _fail(
            ValidationCode.INVALID_STRUCTURE,
            "No valid cards found in file",
            "File must contain at least one card",
        )
    for position, body in enumerate(segments, start=1):
        if not _valid_card_segment(CARD_PREFIX + body):
            return _fail(
                ValidationCode.INVALID_STRUCTURE,
                f"Invalid card structure at position {position}",
                f"Each card must have exactly {CELLS} number positions",
            )
    return OK


def validate_bingo_cards_file(name: str, content: str, mime_type: str = "") -> ValidationResult:
    """Run every check in order and stop at the first failure."""
    checks = (
        lambda: validate_size(len(content.encode("utf-8"))),
        lambda: validate_type(name, mime_type),
        lambda: validate_content(content),
        lambda: validate_card_structure(content),
    )
    for check in checks:
        result = check()
        if not result.valid:
            return result
    return OK


def sanitize_filename(name: str) -> str:
    cleaned = re.sub(r"[^a-zA-Z0-9.-]", "_", name)
    cleaned = re.sub(r"\.{2,}", ".", cleaned)
    return cleaned[:255]


def _raise_for(result: ValidationResult) -> None:
    if not result.valid and result.issue is not None:
        raise BingoCardsFileError(result.issue)


def load_bingo_cards(path: Path, mime_type: str = "") -> Game:
    """Read, validate and parse a ``.bingoCards`` file.

    Raises ``BingoCardsFileError`` when any validation step fails.
    """
    raw = path.read_bytes()
    _raise_for(validate_size(len(raw)))
    content = raw.decode("utf-8", errors="replace")
    _raise_for(validate_bingo_cards_file(path.name, content, mime_type))
    return parse_game(sanitize_filename(path.stem), content)
