# Entry point for `uvicorn main:app` from the repository root
from app.main import app  # noqa: F401
