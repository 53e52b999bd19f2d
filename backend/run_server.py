#!/usr/bin/env python3
"""
Backend server launcher script.

Puts the project root on the Python path so the `backend` package resolves,
then starts uvicorn.
"""

import sys
import os

backend_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(backend_dir)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backend.api:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        reload_dirs=[backend_dir],
    )
