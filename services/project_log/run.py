#!/usr/bin/env python3
"""
Project Log Service Entry Point

This script starts the Project Log service.
"""

import uvicorn
from config.settings import Settings

def main():
    """Start the Project Log service."""
    settings = Settings()

    uvicorn.run(
        "services.project_log.main:app",
        host=settings.service.host,
        port=settings.service.port,
        reload=settings.service.reload,
        log_level=settings.monitoring.log_level.lower()
    )

if __name__ == "__main__":
    main()
