#!/usr/bin/env python3
"""Start the Open Book Wiki API server with uvicorn."""

import uvicorn

from openbook.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "openbook.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
