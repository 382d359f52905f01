"""
Example 01: Basic Mapping

This example demonstrates building targets from objects and row dicts,
renaming members, and replacing members on immutable instances.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from recast import Mapper, configure, copy_into, to, to_dict, with_


@dataclass
class Person:
    """Source model"""
    first_name: str
    last_name: str
    age: int


@dataclass
class Contact:
    """Target model with a renamed member"""
    first_name: str = ""
    surname: str = ""
    age: int = 0


class Settings(BaseModel):
    """Frozen Pydantic model"""
    model_config = ConfigDict(frozen=True)

    host: str
    port: int


def main():
    mapper = Mapper()
    person = Person("Mike", "Doe", 42)

    print("=== Basic Mapping ===\n")

    # Same-name members only
    print("1. Matching members:")
    contact = to(person, Contact)
    print(f"   {contact}\n")

    # Explicit rename
    print("2. Rename last_name -> surname:")
    config = configure(Person, Contact).rename("last_name", "surname").build()
    contact = mapper.build(config, person, Contact, Person)
    print(f"   {contact}\n")

    # Row dicts match case-insensitively when asked to
    print("3. Row dict source:")
    row = {"FIRST_NAME": "Ann", "SURNAME": "Roe", "AGE": 37}
    contact = mapper.build(configure().ignore_case().build(), row, Contact)
    print(f"   {contact}\n")

    # Copy into an existing instance
    print("4. Copy into existing target:")
    target = Contact()
    copy_into(target, {"age": 7})
    print(f"   {target}\n")

    # Updated copies of immutable instances
    print("5. with_ on a frozen model:")
    settings = Settings(host="localhost", port=80)
    moved = with_(settings, port=8080)
    print(f"   before: {settings}")
    print(f"   after:  {moved}\n")

    # Plain dicts for JSON payloads
    print("6. to_dict with a rename and a skip:")
    payload = to_dict(settings, configure().rename("host", "hostname").skip("port").build())
    print(f"   {payload}\n")

    print(f"Plans compiled: {mapper.cache.compilations}")


if __name__ == "__main__":
    main()
