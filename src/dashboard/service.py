import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple, Optional, Tuple, Union
from logging import getLogger

from dateutil.relativedelta import relativedelta
from pydantic import TypeAdapter
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.database.repository import Repository
from src.entities.order import Order
from src.entities.product import Product
from src.entities.user import User
from src.dashboard.model import StatsCount, StatsPercentage, StatsSnapshot
from src.utils.cache import ADMIN_STATS_KEY, CacheStore, get_or_compute

logger = getLogger(__name__)

Number = Union[int, Decimal]

PERCENTAGE_PRECISION = Decimal("0.01")

stats_adapter = TypeAdapter(StatsSnapshot)


class TimeWindow(NamedTuple):
    start: datetime
    end: datetime


def calculate_percentage(current: Number, previous: Number) -> Decimal:
    """
    Variação percentual de ``previous`` para ``current``, com duas casas.

    Com base zero o resultado é ``current * 100`` (ex.: 5 contra 0 -> 500).
    """
    current = Decimal(str(current))
    previous = Decimal(str(previous))

    if previous == 0:
        percent = current * 100
    else:
        percent = (current - previous) / previous * 100

    return percent.quantize(PERCENTAGE_PRECISION, rounding=ROUND_HALF_UP)


def get_month_windows(now: datetime) -> Tuple[TimeWindow, TimeWindow]:
    """
    Returns (this_month, last_month). Both bounds of both windows are
    inclusive; last month ends one microsecond before this month starts.
    """
    this_month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    last_month_start = this_month_start - relativedelta(months=1)

    this_month = TimeWindow(start=this_month_start, end=now)
    last_month = TimeWindow(
        start=last_month_start, end=this_month_start - timedelta(microseconds=1)
    )
    return this_month, last_month


def sum_revenue(totals: Iterable[Optional[Number]]) -> Decimal:
    # Orders without a total count as zero
    return sum((Decimal(str(total or 0)) for total in totals), Decimal(0))


async def compute_dashboard_stats(
    products: Repository[Product],
    users: Repository[User],
    orders: Repository[Order],
    now: Optional[datetime] = None,
) -> StatsSnapshot:
    """
    Calcula os totais e as variações mês a mês do painel administrativo.

    As nove consultas rodam em paralelo; se qualquer uma falhar o erro
    sobe e nenhum resultado parcial é usado.
    """
    this_month, last_month = get_month_windows(now or datetime.now(timezone.utc))

    (
        this_month_products,
        last_month_products,
        this_month_users,
        last_month_users,
        this_month_orders,
        last_month_orders,
        total_products,
        total_users,
        all_order_totals,
    ) = await asyncio.gather(
        products.find_created_between(*this_month),
        products.find_created_between(*last_month),
        users.find_created_between(*this_month),
        users.find_created_between(*last_month),
        orders.find_created_between(*this_month),
        orders.find_created_between(*last_month),
        products.count(),
        users.count(),
        orders.values(Order.total),
    )

    this_month_revenue = sum_revenue(order.total for order in this_month_orders)
    last_month_revenue = sum_revenue(order.total for order in last_month_orders)

    percentage = StatsPercentage(
        revenue=calculate_percentage(this_month_revenue, last_month_revenue),
        product=calculate_percentage(len(this_month_products), len(last_month_products)),
        user=calculate_percentage(len(this_month_users), len(last_month_users)),
        order=calculate_percentage(len(this_month_orders), len(last_month_orders)),
    )

    count = StatsCount(
        revenue=sum_revenue(all_order_totals),
        product=total_products,
        user=total_users,
        order=len(all_order_totals),
    )

    logger.info(
        f"Estatísticas do painel recalculadas: receita do mês {this_month_revenue} "
        f"contra {last_month_revenue} no mês anterior"
    )
    return StatsSnapshot(count=count, percentage=percentage)


async def get_dashboard_stats(
    session_factory: async_sessionmaker[AsyncSession],
    cache: CacheStore,
    now: Optional[datetime] = None,
) -> StatsSnapshot:
    async def compute():
        return await compute_dashboard_stats(
            Repository(Product, session_factory),
            Repository(User, session_factory),
            Repository(Order, session_factory),
            now=now,
        )

    return await get_or_compute(cache, ADMIN_STATS_KEY, compute, stats_adapter)
