# FastAPI Application Redirect
# This file re-exports the app from the app package

from app.main import app  # noqa: F401

# Lets uvicorn find the app when running from the repository root:
# uvicorn main:app --host 0.0.0.0 --port 8000
