"""
Example 03: Async Support

This example demonstrates AsyncMapper awaiting async transformers while
sharing plans with the synchronous Mapper.
"""

import asyncio
from dataclasses import dataclass

from recast import AsyncMapper, Mapper, PlanCache, configure


@dataclass
class Employee:
    name: str
    manager_id: int


@dataclass
class EmployeeView:
    name: str = ""
    manager: str = ""


DIRECTORY = {1: "Grace", 2: "Ada"}


async def lookup_manager(manager_id: int) -> str:
    # Stand-in for a service call
    await asyncio.sleep(0.01)
    return DIRECTORY.get(manager_id, "unknown")


async def main():
    cache = PlanCache()
    async_mapper = AsyncMapper(cache)
    mapper = Mapper(cache)

    config = (
        configure(Employee, EmployeeView)
        .rename("manager_id", "manager")
        .map_property("manager_id", lookup_manager)
        .build()
    )

    print("=== Async Support ===\n")

    print("1. Concurrent builds:")
    staff = [Employee("Alan", 1), Employee("Linus", 2), Employee("Barbara", 3)]
    views = await asyncio.gather(
        *(async_mapper.build(config, e, EmployeeView, Employee) for e in staff)
    )
    for view in views:
        print(f"   {view}")

    print("\n2. Sync engine without the lookup:")
    plain = configure(Employee, EmployeeView).skip("manager_id").build()
    print(f"   {mapper.build(plain, staff[0], EmployeeView, Employee)}")
    print(f"   Plans compiled: {cache.compilations}")


if __name__ == "__main__":
    asyncio.run(main())
