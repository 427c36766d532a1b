from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

# Pages are served only through the routes below so the page guard applies;
# STATIC_DIR holds the scripts and stylesheet they load.
HTML_DIR = Path(__file__).parent / "html"
STATIC_DIR = Path(__file__).parent / "static"

router = APIRouter(include_in_schema=False)


@router.get("/login")
async def login_page():
    return FileResponse(HTML_DIR / "login.html")


@router.get("/chat")
async def chat_page():
    return FileResponse(HTML_DIR / "chat.html")


@router.get("/users")
async def users_page():
    return FileResponse(HTML_DIR / "users.html")
