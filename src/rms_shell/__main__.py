"""
Entry point for running the shell server.

The shell holds one credential pair per process and serves it to every
request, so it binds to the loopback interface unless HOST says otherwise.
"""

import os

import uvicorn

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


def bind_address() -> tuple[str, int]:
    """Host and port from HOST/PORT, loopback by default."""
    host = os.getenv("HOST") or DEFAULT_HOST
    # PORT for PaaS platforms (Railway, Heroku, etc.)
    port = int(os.getenv("PORT") or DEFAULT_PORT)
    return host, port


if __name__ == "__main__":
    host, port = bind_address()
    uvicorn.run("rms_shell.api.main:app", host=host, port=port)
