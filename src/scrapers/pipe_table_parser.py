# src/scrapers/pipe_table_parser.py

"""Parser for pipe-delimited pseudo-tables (``| name | unit | min | max | avg |``)."""

import re

from src.models.candidate_record import CandidateRecord
from src.scrapers.base_parser import ShapeParser

PIPE_LINE_RE = re.compile(r"^\s*\|(?P<body>.*)\|\s*$")
_SEPARATOR_RE = re.compile(r"^[\s|:\-+=]*$")
_FIELD_COUNT = 5


class PipeTableParser(ShapeParser):
    """Extract rows with exactly five pipe-separated fields."""

    shape = "pipe_table"

    def _split_line(self, line: str) -> list[str] | None:
        """Return the five cleaned fields of *line*, or ``None``."""
        if not line.strip() or _SEPARATOR_RE.match(line):
            return None
        match = PIPE_LINE_RE.match(line)
        if not match:
            return None
        fields = [
            self.clean_text(f) for f in match.group("body").split("|")
        ]
        if len(fields) != _FIELD_COUNT:
            return None
        return fields

    def parse(self, text: str) -> list[CandidateRecord]:
        """Scan *text* line by line for data rows."""
        candidates: list[CandidateRecord] = []
        skipped = 0

        for line in text.splitlines():
            fields = self._split_line(line)
            if fields is None:
                continue
            if not fields[0] or not fields[1] or self.is_header(fields):
                skipped += 1
                continue
            candidates.append(self.to_candidate(fields))

        if skipped:
            self.logger.debug("Skipped %d header/blank pipe rows", skipped)
        return candidates
