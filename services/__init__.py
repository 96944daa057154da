# services/__init__.py

# This file makes the 'services' directory a Python package and
# exposes its modules for import.

from . import notifications
from . import debounce
from . import list_query
from . import catalog_browser
from . import product_editor
from . import sessions
