#!/usr/bin/env python
"""
Entry point for running the Weekly Goals API server
"""

import uvicorn

from weekly_goals_api.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "weekly_goals_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        reload_dirs=["./src"],
    )
