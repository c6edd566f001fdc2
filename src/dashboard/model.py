from decimal import Decimal
from typing import Annotated
from pydantic import PlainSerializer
from src.schemas.base import CamelModel

# Decimal internamente, número no JSON
JsonDecimal = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class StatsCount(CamelModel):
    revenue: JsonDecimal
    product: int
    user: int
    order: int


class StatsPercentage(CamelModel):
    """Variação percentual do mês corrente em relação ao mês anterior."""

    revenue: JsonDecimal
    product: JsonDecimal
    user: JsonDecimal
    order: JsonDecimal


class StatsSnapshot(CamelModel):
    count: StatsCount
    percentage: StatsPercentage
