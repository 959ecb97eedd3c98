"""PreCalc tutor HTTP service.

The FastAPI application lives in `main.py`; each API area exposes
`get_router()` under `routers/`.
"""
