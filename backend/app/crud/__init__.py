from .crud_user import user
from .crud_provider import provider
from . import crud_catalog
from . import crud_quote
