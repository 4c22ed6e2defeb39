"""ORM model registry: import all models so ``Base.metadata.create_all`` sees them."""

from county_results_api.models.base import Base
from county_results_api.models.county_link import CountyLink

__all__ = [
    "Base",
    "CountyLink",
]
