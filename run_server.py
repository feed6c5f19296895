#!/usr/bin/env python3
"""
Server startup script for PayStream.

Starts the FastAPI application with uvicorn.
"""

import os

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "paystream.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 8000)),
        reload=os.getenv("DEBUG", "false").lower() == "true",
    )
