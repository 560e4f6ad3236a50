"""Web server entry point for the Studio content API"""

import os

import uvicorn

# Load environment variables from .env file BEFORE importing anything else
from dotenv import load_dotenv
load_dotenv()

from studio_web.main import create_app


if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3001"))

    app = create_app()
    print("Starting Studio content API...")
    print(f"Local server will be available at: http://localhost:{port}")
    print()

    try:
        uvicorn.run(app, host=host, port=port, reload=False)
    except KeyboardInterrupt:
        print("\nShutting down...")
