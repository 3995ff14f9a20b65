from datetime import date

from pydantic import BaseModel, ConfigDict


class DateRange(BaseModel):
    """Intervalo inclusivo nas duas pontas."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date
    label: str = ""
