import random

from sqlalchemy import event
from sqlalchemy.orm import declarative_base

# Shared Base for all models
Base = declarative_base()

# Tables keyed by a random id; the last two digits tell the entity apart
ID_POSTFIX = {
    "users": 1,
    "photos": 3,
}


def generate_random_id(table: str) -> int:
    """8-digit id: 6 random digits followed by the table's 2-digit postfix."""
    try:
        postfix = ID_POSTFIX[table]
    except KeyError:
        raise ValueError(f"No random ids for table {table!r}") from None
    return random.randint(0, 999_999) * 100 + postfix


@event.listens_for(Base, "before_insert", propagate=True)
def assign_random_id(mapper, connection, target):
    # uuid-keyed and natural-keyed tables are left alone
    table = target.__tablename__
    if table in ID_POSTFIX and getattr(target, "id", None) is None:
        target.id = generate_random_id(table)
