from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from routes.commands import router as commands_router

PROJECT_URL = "https://github.com/hahmadi82/chicktactoe"

app = FastAPI(title="Chick Tac Toe", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(commands_router, prefix="/api")


@app.get("/", response_class=HTMLResponse)
def landing() -> str:
    return f"<a href='{PROJECT_URL}'>Chick Tac Toe</a> for Slack!"


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
