import uvicorn

from core.config import settings
from main import app

if __name__ == "__main__":
    # Start FastAPI server
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level=(settings.LOG_LEVEL or "info").lower())
