import uuid
from datetime import date, datetime, timezone

from sqlalchemy import JSON, Date, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.dialects import mysql
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from quote_sync.common.constants import ColumnSize

Base = declarative_base()


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# Microsecond timestamps on MySQL for newest-first ordering
PreciseDateTime = DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), "mysql")


class CustomerDBModel(Base):
    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(String(ColumnSize.ID), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(ColumnSize.CUSTOMER_NAME), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(ColumnSize.EMAIL), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(PreciseDateTime, default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class SiteDBModel(Base):
    __tablename__ = "sites"
    __table_args__ = (UniqueConstraint("customer_id", "address", name="uq_sites_customer_address"),)

    id: Mapped[str] = mapped_column(String(ColumnSize.ID), primary_key=True, default=generate_uuid)
    customer_id: Mapped[str] = mapped_column(String(ColumnSize.ID), ForeignKey("customers.id"), nullable=False)
    address: Mapped[str] = mapped_column(String(ColumnSize.ADDRESS), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class QuoteDBModel(Base):
    __tablename__ = "quotes"

    id: Mapped[str] = mapped_column(String(ColumnSize.ID), primary_key=True, default=generate_uuid)
    site_id: Mapped[str] = mapped_column(String(ColumnSize.ID), ForeignKey("sites.id"), nullable=False, index=True)
    quote_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    products: Mapped[list] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(PreciseDateTime, default=utc_now, nullable=False)


class CredentialsDBModel(Base):
    __tablename__ = "qbo_credentials"

    key: Mapped[str] = mapped_column(String(ColumnSize.CREDENTIALS_KEY), primary_key=True)
    connection_details: Mapped[dict] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
