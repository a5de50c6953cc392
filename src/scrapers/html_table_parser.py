# src/scrapers/html_table_parser.py

"""Parser for market prices laid out as HTML tables."""

from bs4 import BeautifulSoup, Tag

from src.models.candidate_record import CandidateRecord
from src.scrapers.base_parser import ShapeParser

_MIN_CELLS = 3


class HtmlTableParser(ShapeParser):
    """Extract ``name | unit | min | max | avg`` rows from ``<table>`` markup."""

    shape = "html_table"

    def _row_cells(self, row: Tag) -> list[str]:
        """Return the non-empty cleaned cell texts of one ``<tr>``."""
        cells = [
            self.clean_text(cell.get_text(" "))
            for cell in row.find_all(["td", "th"])
        ]
        return [c for c in cells if c]

    def parse(self, text: str) -> list[CandidateRecord]:
        """Walk every table row after the header and keep usable ones."""
        soup = BeautifulSoup(text, "lxml")
        candidates: list[CandidateRecord] = []

        tables = soup.find_all("table")
        for table_idx, table in enumerate(tables):
            for row in table.find_all("tr"):
                # Rows made only of <th> cells are headers
                if row.find("td") is None:
                    continue
                cells = self._row_cells(row)
                if len(cells) < _MIN_CELLS:
                    continue
                if self.is_header(cells):
                    continue
                candidates.append(self.to_candidate(cells))

            self.logger.debug(
                "Table %d yielded %d candidate rows so far",
                table_idx,
                len(candidates),
            )

        return candidates
