"""
Rewriter API application.

Run with:
    uvicorn main:app --host 127.0.0.1 --port 8765
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from logs import setup_llm_logging, get_llm_logger
from rewriter import router as rewriter_router
from rewriter.runtime import get_runtime, close_runtime


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_llm_logging()
    runtime = get_runtime()
    await runtime.store.load()
    get_llm_logger().info("[APP] Started")
    yield
    await close_runtime()
    get_llm_logger().info("[APP] Stopped")


app = FastAPI(title="Rewriter", lifespan=lifespan)
app.include_router(rewriter_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
