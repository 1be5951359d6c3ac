from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Text
from sqlalchemy.dialects import mysql
from sqlmodel import Field, SQLModel

# MySQL DATETIME drops sub-second precision unless asked for it
CreatedAtType = DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), "mysql")


class SuggestionModel(SQLModel, table=True):
    __tablename__ = "suggestions"

    id: str = Field(primary_key=True, max_length=48)
    name: str = Field(max_length=200, nullable=False)
    email: str = Field(max_length=320, nullable=False)
    type: str = Field(max_length=60, nullable=False)
    message: str = Field(sa_column=Column(Text, nullable=False))
    impact: str = Field(default="", max_length=30)
    extra: str = Field(default="", sa_column=Column(Text))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(CreatedAtType, nullable=False, index=True),
    )
