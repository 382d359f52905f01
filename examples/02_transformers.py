"""
Example 02: Transformers

This example demonstrates type-level, tag-level and property-level
transformers, the suppress error policy, and reading earlier results with
resolved().
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Annotated

from recast import AssignmentTypeError, Mapper, configure, resolved


@dataclass(frozen=True)
class Mask:
    """Tag: keep the last `keep` characters visible"""
    keep: int


@dataclass
class Order:
    customer: str
    card: Annotated[str, Mask(4)]
    created: datetime
    shipped: datetime
    quantity: str


@dataclass
class OrderView:
    customer: str = ""
    card: str = ""
    created: datetime | None = None
    shipped: datetime | None = None
    quantity: int = 0
    summary: str = ""


def mask(tag: Mask, value: str) -> str:
    return "*" * (len(value) - tag.keep) + value[-tag.keep:]


def main():
    mapper = Mapper()
    local = timezone(timedelta(hours=2))
    order = Order(
        customer="alice",
        card="4111111111111111",
        created=datetime(2024, 5, 1, 9, tzinfo=local),
        shipped=datetime(2024, 5, 2, 17, tzinfo=local),
        quantity="three",
    )

    print("=== Transformers ===\n")

    base = (
        configure(Order, OrderView)
        .map_type(datetime, lambda dt: dt.astimezone(timezone.utc))
        .map_tag(Mask, mask)
        .map_property("customer", str.title)
    )

    # A string quantity cannot be written to an int member
    print("1. Default policy raises:")
    try:
        mapper.build(base.build(), order, OrderView, Order)
    except AssignmentTypeError as e:
        print(f"   {e}\n")

    # Suppress skips the member instead
    print("2. Suppress policy:")
    view = mapper.build(base.suppress_errors().build(), order, OrderView, Order)
    print(f"   {view}\n")

    # A later member derived from earlier results
    print("3. Derived member:")
    config = (
        configure(Order, OrderView)
        .rename("quantity", "summary")
        .map_property("customer", str.title)
        .map_property("quantity", lambda q: f"{q} item(s) for {resolved('customer')}")
        .build()
    )
    view = mapper.build(config, order, OrderView, Order)
    print(f"   {view.summary}\n")


if __name__ == "__main__":
    main()
