"""Read-only reports for the administrator dashboard."""

from datetime import UTC, date, datetime, timedelta

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from medstore.account.user import Role, User
from medstore.category.category import Category
from medstore.order.order import Order
from medstore.product.product import Product
from medstore.projections.daily_order_stats import DailyOrderStats
from medstore.settings import LOW_STOCK_THRESHOLD
from medstore.shared.listing import count, fetch_all
from medstore.shared.timestamps import as_utc


def _months_back(day, months):
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    return date(year, month + 1, 1)


def _iso_week(day):
    year, week, _ = day.isocalendar()
    return f"{year}-W{week:02d}"


# period -> (start of window given today, bucket label for a day)
_PERIODS = {
    "daily": (lambda today: today - timedelta(days=7), lambda d: d.isoformat()),
    "weekly": (lambda today: today - timedelta(days=84), _iso_week),
    "monthly": (lambda today: _months_back(today, 12), lambda d: f"{d.year}-{d.month:02d}"),
    "yearly": (lambda today: date(today.year - 5, 1, 1), lambda d: str(d.year)),
}

SALES_PERIODS = tuple(_PERIODS)


def top_products(orders, limit=5):
    """Best sellers by quantity across ``orders``, with the revenue they brought in."""
    sold = {}
    for order in orders:
        for item in order.items:
            entry = sold.setdefault(
                str(item.product_id),
                {"product_id": str(item.product_id), "name": item.product_name, "total_sold": 0, "revenue": 0.0},
            )
            entry["total_sold"] += item.quantity
            entry["revenue"] += item.line_total

    # Products removed from the catalog drop out of the ranking
    live = {str(p.id): p for p in fetch_all(Product)}
    ranked = sorted(sold.values(), key=lambda e: e["total_sold"], reverse=True)
    ranked = [e for e in ranked if e["product_id"] in live][:limit]
    for entry in ranked:
        entry["name"] = live[entry["product_id"]].name
    return ranked


def dashboard():
    orders = sorted(fetch_all(Order), key=lambda o: as_utc(o.created_at), reverse=True)

    return {
        "stats": {
            "total_products": count(Product),
            "total_categories": count(Category),
            "total_users": count(User),
            "total_orders": len(orders),
            "total_revenue": sum(o.total_amount for o in orders),
            "low_stock_products": count(Product, stock__lt=LOW_STOCK_THRESHOLD),
        },
        "recent_orders": orders[:5],
        "top_products": top_products(orders),
    }


def sales_by_period(period, today=None):
    if period not in _PERIODS:
        raise ValidationError({"period": ["Invalid period"]})

    window_start, label_for = _PERIODS[period]
    today = today or datetime.now(UTC).date()
    start = window_start(today)

    buckets = {}
    for record in fetch_all(DailyOrderStats):
        day = date.fromisoformat(record.date)
        if day < start or not record.orders_placed:
            continue
        bucket = buckets.setdefault(label_for(day), {"total_sales": 0.0, "order_count": 0})
        bucket["total_sales"] += record.total_sales or 0.0
        bucket["order_count"] += record.orders_placed

    return [
        {
            "period": label,
            "total_sales": round(bucket["total_sales"], 2),
            "order_count": bucket["order_count"],
            "average_order_value": round(bucket["total_sales"] / bucket["order_count"], 2),
        }
        for label, bucket in sorted(buckets.items())
    ]


def user_summary():
    users = current_domain.repository_for(User).newest_first()
    admins = sum(1 for u in users if u.role == Role.ADMIN.value)
    return {
        "stats": {
            "total_users": len(users),
            "admin_users": admins,
            "regular_users": len(users) - admins,
        },
        "recent_users": users[:10],
    }


def product_summary():
    products = fetch_all(Product)
    categories = {str(c.id): c.name for c in fetch_all(Category)}

    by_category = {}
    for product in products:
        name = categories.get(str(product.category_id))
        if name is None:
            continue
        entry = by_category.setdefault(name, {"category": name, "count": 0, "total_stock": 0})
        entry["count"] += 1
        entry["total_stock"] += product.stock

    low_stock = [p for p in products if p.stock < LOW_STOCK_THRESHOLD]
    return {
        "stats": {"total_products": len(products), "low_stock_count": len(low_stock)},
        "low_stock_products": sorted(low_stock, key=lambda p: p.stock),
        "products_by_category": sorted(by_category.values(), key=lambda e: e["count"], reverse=True),
    }
