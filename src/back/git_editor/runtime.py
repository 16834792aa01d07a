"""Production runtime app for git-editor.

Configuration comes entirely from the environment (see ``APIConfig``).
The editor frontend is served separately.

    uvicorn git_editor.runtime:app
"""

from .api import create_app


app = create_app()
