"""CSV exporter."""
import csv
from io import StringIO
from typing import List, Optional, Sequence

from ..formatting import Style
from ..models import SourceRecord
from .base import ReferenceExporter

CSV_HEADER = ("Title", "Authors", "Year", "Source", "Type", "URL", "DOI", "Pages", "Volume", "Issue")


def csv_row(record: SourceRecord) -> List[str]:
    """Field values of one record in CSV_HEADER order."""
    return [
        record.title,
        "; ".join(record.authors),
        record.year,
        record.source,
        record.type.value,
        record.url,
        record.doi,
        record.pages,
        record.volume,
        record.issue,
    ]


class CSVExporter(ReferenceExporter):
    """
    One header row plus one row per record, every field double-quoted.

    Without escaping, embedded quotes are written as-is; with escaping the
    rows go through ``csv.writer`` which doubles them.
    """

    format_name = "csv"
    file_extension = "csv"
    mime_type = "text/csv"
    separator = "\n"

    def export(self, records: Sequence[SourceRecord], style: Optional[Style] = None) -> str:
        lines = [",".join(CSV_HEADER)]
        if self.escape:
            output = StringIO()
            writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
            writer.writerows(csv_row(record) for record in records)
            lines.append(output.getvalue().rstrip("\n"))
        else:
            lines.extend(self.export_entry(record) for record in records)
        return "\n".join(lines)

    def export_entry(self, record: SourceRecord, style: Optional[Style] = None) -> str:
        return ",".join(f'"{value}"' for value in csv_row(record))
