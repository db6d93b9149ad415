"""
Run the CroweCode Intelligence service with uvicorn.
"""
import uvicorn

from .config import get_settings

if __name__ == "__main__":
    settings = get_settings()

    print("Starting CroweCode Intelligence...")
    print(f"Server will be available at: http://{settings.host}:{settings.port}")
    print(f"API Documentation: http://{settings.host}:{settings.port}/docs")
    print("-" * 50)

    uvicorn.run(
        "crowecode_ai.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
