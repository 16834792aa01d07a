"""git-editor: backend for a browser code editor working on GitHub repositories.

The browser never holds the user's access token. It exchanges the token
once for an opaque session id and every later call goes through this
service, which talks to the GitHub REST API on the user's behalf.
"""

__version__ = '0.1.0'
