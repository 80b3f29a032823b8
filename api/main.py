import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ipreg.settings import settings

logging.basicConfig(level=settings.log_level)

app = FastAPI(
    title="IP Registry API",
    version="0.1.0",
    description="HTTP layer over the ownership-controlled IP registry.",
)

# --- CORS ----------------------------------------------------------
# Dev-only origins; tighten in production.
origins = [
    "http://localhost:5173",    # Vite dev server default port
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "X-Principal"],
)

# --- Include Routers ----------------------------------------------------------
from .ip import router as ip_router

app.include_router(ip_router)


# Precondition violations (e.g. empty principal) surface as 422
@app.exception_handler(ValueError)
def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# ---------- health-check ----------
@app.get("/")
def root():
    return {"status": "ok", "msg": "IP Registry API is alive"}
