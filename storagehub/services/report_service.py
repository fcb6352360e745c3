"""
Report Service
CSV export of the dashboard summary, unit metrics and customer segments.

Each section has its own row model with a fixed column order, so the
written columns are declared once instead of being assembled positionally.
"""
import csv
import io
from datetime import date
from typing import ClassVar, List, Sequence, Tuple, Union

from pydantic import BaseModel

from storagehub.schemas.analytics import CustomerSegment, DashboardSummary, UnitSizeMetrics


class ReportRow(BaseModel):
    """A CSV row whose column order follows COLUMNS."""
    COLUMNS: ClassVar[Tuple[Tuple[str, str], ...]] = ()

    @classmethod
    def header(cls) -> List[str]:
        return [title for _, title in cls.COLUMNS]

    def cells(self) -> list:
        return [getattr(self, field) for field, _ in self.COLUMNS]


class SummaryRow(ReportRow):
    COLUMNS: ClassVar[Tuple[Tuple[str, str], ...]] = (("label", "Metric"), ("value", "Value"))

    label: str
    value: Union[int, float]


class UnitMetricsRow(ReportRow):
    COLUMNS: ClassVar[Tuple[Tuple[str, str], ...]] = (
        ("size", "Size"),
        ("total_units", "Total Units"),
        ("occupied_units", "Occupied Units"),
        ("occupancy_rate", "Occupancy Rate"),
        ("avg_price", "Avg Price"),
        ("revenue_per_sqm", "Revenue per SqM"),
        ("total_revenue", "Total Revenue"),
    )

    size: str
    total_units: int
    occupied_units: int
    occupancy_rate: float
    avg_price: float
    revenue_per_sqm: float
    total_revenue: float

    @classmethod
    def from_metrics(cls, m: UnitSizeMetrics) -> "UnitMetricsRow":
        return cls(size=m.size.value, **m.model_dump(exclude={"size", "available_units"}))


class SegmentRow(ReportRow):
    COLUMNS: ClassVar[Tuple[Tuple[str, str], ...]] = (
        ("type", "Type"),
        ("count", "Count"),
        ("percentage", "Percentage"),
        ("total_revenue", "Total Revenue"),
    )

    type: str
    count: int
    percentage: float
    total_revenue: float

    @classmethod
    def from_segment(cls, s: CustomerSegment) -> "SegmentRow":
        return cls(type=s.type.value, count=s.count, percentage=s.percentage, total_revenue=s.total_revenue)


def summary_rows(summary: DashboardSummary) -> List[SummaryRow]:
    return [
        SummaryRow(label="Total Customers", value=summary.total_customers),
        SummaryRow(label="Monthly Revenue", value=summary.monthly_revenue),
        SummaryRow(label="Occupancy Rate", value=summary.total_occupancy_rate),
        SummaryRow(label="Churn Rate", value=summary.churn_rate),
        SummaryRow(label="Avg Customer Lifetime Value", value=summary.avg_customer_lifetime_value),
    ]


def _write_section(writer, title: str, row_type, rows: Sequence[ReportRow]) -> None:
    writer.writerow([title])
    writer.writerow(row_type.header())
    for row in rows:
        writer.writerow(row.cells())


def build_summary_csv(
    summary: DashboardSummary,
    unit_metrics: Sequence[UnitSizeMetrics],
    segments: Sequence[CustomerSegment],
) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf)

    _write_section(writer, "Summary", SummaryRow, summary_rows(summary))
    writer.writerow([])
    _write_section(
        writer, "Unit Metrics", UnitMetricsRow,
        [UnitMetricsRow.from_metrics(m) for m in unit_metrics],
    )
    writer.writerow([])
    _write_section(
        writer, "Customer Segments", SegmentRow,
        [SegmentRow.from_segment(s) for s in segments],
    )
    return buf.getvalue()


def report_filename(as_of: date) -> str:
    return f"StorageHub_Report_{as_of.isoformat()}.csv"
