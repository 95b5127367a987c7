"""Catalog domain: filter normalization, predicates, sorting, paging and facets."""

from .fields import *  # noqa: F401,F403
from .models import *  # noqa: F401,F403
from .normalizer import *  # noqa: F401,F403
from .predicate_builder import *  # noqa: F401,F403
from .sorting import *  # noqa: F401,F403
from .paging import *  # noqa: F401,F403
from .ports import *  # noqa: F401,F403
from .facets import *  # noqa: F401,F403
from .registry import *  # noqa: F401,F403
