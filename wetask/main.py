"""Main application entry point.

Initializes logging and creates the FastAPI instance using the application
factory pattern. Serve with ``uvicorn wetask.main:app`` or ``python -m wetask``.
"""

from wetask.core.application import create_application
from wetask.core.initialization import initialize_application

initialize_application()

app = create_application()
