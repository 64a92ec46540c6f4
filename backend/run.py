"""Run script with proper environment loading"""
import os
import sys
from pathlib import Path

# Add backend directory to path for imports
BACKEND_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(BACKEND_DIR))

# Load environment variables
from dotenv import load_dotenv

env_file = BACKEND_DIR.parent / ".env"
load_dotenv(env_file)

# Relative paths in settings (sqlite file, logs) resolve from the project root
os.chdir(BACKEND_DIR.parent)

if __name__ == "__main__":
    import uvicorn
    from virtual_doctor.core.config import get_settings

    settings = get_settings()

    # Import app directly instead of using string to avoid path issues
    from virtual_doctor.main import app

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        workers=1,
    )
