
# qa_service/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py                    # ErrorKind + one exception class per failure kind
# │   ├── integrity_classifier.py    # SQL-level constraint classification
# │   └── mapper.py                  # map_error() response table + db_error_handler()

from .base import *  # noqa: F401,F403
from .base import __all__ as _base_all
from .mapper import ErrorResponse, map_error, db_error_handler

__all__ = [*_base_all, "ErrorResponse", "map_error", "db_error_handler"]
