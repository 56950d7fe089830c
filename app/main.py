import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import CORS_ORIGINS, LOG_LEVEL, GEMINI_MODEL, RESULT_POLICY
from app.core.database import mongodb
from app.routers import advisory, chat, crops, sessions

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="KrishiSahay API",
    description="Market analysis, post-harvest advice and a farming chat assistant for Indian farmers",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def startup_event():
    await mongodb.connect()

@app.on_event("shutdown")
async def shutdown_event():
    await mongodb.disconnect()

app.include_router(crops.router)
app.include_router(advisory.router)
app.include_router(chat.router)
app.include_router(sessions.router)

@app.get("/")
async def root():
    return {
        "message": "KrishiSahay API - Farmer Assistance",
        "version": "1.0.0",
        "endpoints": {
            "crops": "/crops",
            "advisory": "/advisory",
            "chat": "/chat",
            "sessions": "/sessions"
        }
    }

@app.get("/health")
async def health():
    return {
        "ok": True,
        "model": GEMINI_MODEL,
        "result_policy": RESULT_POLICY,
    }
