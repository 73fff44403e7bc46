"""
Entry point to run the Conveo Insights backend with one command.

Usage:
    python main.py

Then, in a separate terminal:
    streamlit run ui_app.py
"""

import logging

import uvicorn
from dotenv import load_dotenv

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


if __name__ == "__main__":
    # Must run before the app import so Settings sees OPENAI_API_KEY.
    load_dotenv()

    from conveo_insights.backend import app

    uvicorn.run(app, host="0.0.0.0", port=8000)
