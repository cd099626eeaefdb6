import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FrontMatter(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    date: str
    slug: str = Field(min_length=1)

    @field_validator("date", mode="before")
    @classmethod
    def _convert_date(cls, value):
        # YAML turns `date: 2025-01-01` into a date object; keep it as display text
        if isinstance(value, (datetime.date, datetime.datetime)):
            return value.isoformat()
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


ERROR_FRONT_MATTER = FrontMatter(title="Error", date="Error", slug="Error")


class Post(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    slug: str
