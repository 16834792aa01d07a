"""Run the git-editor API server.

Usage:
    HOST=0.0.0.0 PORT=8000 python -m git_editor
"""

import os

import uvicorn


def main():
    host = os.environ.get("HOST", "127.0.0.1")
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run("git_editor.runtime:app", host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
