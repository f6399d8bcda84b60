#!/usr/bin/env python3
"""
Convenience script to run the WeShare gateway.
"""
import uvicorn
from weshare_gateway.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "weshare_gateway.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower()
    )
