from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import router as game_router


app = FastAPI(title="Survival Kitchen")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(game_router, prefix="/api")


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
