"""
Entry point to run the p5studio server.
"""
from dotenv import load_dotenv
load_dotenv()

import uvicorn

from p5studio.config import configure_logging, load_settings

if __name__ == "__main__":
    configure_logging(load_settings().log_level)
    uvicorn.run(
        "p5studio.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
