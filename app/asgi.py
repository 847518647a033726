# app/asgi.py
import sys, asyncio

# Switch the event loop on Windows BEFORE importing the rest
if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from app.main import app  # noqa: E402,F401
