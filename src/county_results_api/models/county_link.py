"""CountyLink model: where and how to fetch one county's results.

The pipeline reads these rows to decide which parser and URL to use for
each county. Parsed results live in per-county tables managed by the
results store, not in this table.
"""

from sqlalchemy import CheckConstraint, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from county_results_api.models.base import Base, TimestampMixin, UUIDMixin


class CountyLink(Base, UUIDMixin, TimestampMixin):
    """Data source configuration for one county.

    Attributes:
        county_name: Display name of the county (e.g., "Marin").
        link: Source URL of the published results.
        parse_method: Ingestion strategy, "zip" or "html".
    """

    __tablename__ = "county_links"

    county_name: Mapped[str] = mapped_column(String(200), nullable=False)
    link: Mapped[str] = mapped_column(Text, nullable=False)
    parse_method: Mapped[str] = mapped_column(String(20), nullable=False)

    __table_args__ = (
        CheckConstraint("parse_method IN ('zip', 'html')", name="ck_county_link_parse_method"),
        CheckConstraint("length(county_name) > 0", name="ck_county_link_county_name"),
        CheckConstraint("length(link) > 0", name="ck_county_link_link"),
        Index("idx_county_links_parse_method", "parse_method"),
    )
