"""SQLAlchemy models."""

from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models so Base.metadata.create_all() picks them up
from app.models.asset import Asset  # noqa: E402, F401
from app.models.hypothesis import Hypothesis  # noqa: E402, F401
from app.models.snapshot import Snapshot  # noqa: E402, F401
from app.models.dividend import Dividend  # noqa: E402, F401
from app.models.allocation_objective import AllocationObjective  # noqa: E402, F401
