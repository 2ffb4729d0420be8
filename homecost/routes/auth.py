from fastapi import APIRouter, Request, Form, status, Depends
from fastapi.responses import RedirectResponse, JSONResponse
from sqlalchemy.orm import Session
from homecost.db import get_db
from homecost.models.user import User
from homecost.utils.auth import verify_password, hash_password
from homecost.logging_config import get_logger

# Module logger for authentication operations
logger = get_logger(__name__)

router = APIRouter()

def unique_username(db: Session, username: str):
    return db.query(User).filter(User.username == username).first() is None

@router.post("/register")
def register_post(name: str = Form(...), username: str = Form(...), password: str = Form(...), db: Session = Depends(get_db)):
    logger.info(f"Registration attempt for username: {username}")
    username = username.strip()
    if not username or not password:
        return JSONResponse({"error": "Username and password are required."}, status_code=400)
    if not unique_username(db, username):
        logger.warning(f"Registration failed - username already taken: {username}")
        return JSONResponse({"error": "Username already taken."}, status_code=400)
    user = User(name=name.strip(), username=username, password_hash=hash_password(password))
    db.add(user)
    db.commit()
    logger.info(f"New user registered successfully: {username}")
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)

@router.post("/login")
def login_post(username: str = Form(...), password: str = Form(...), db: Session = Depends(get_db)):
    logger.info(f"Login attempt for username: {username}")
    user = db.query(User).filter(User.username == username).first()
    if user and verify_password(password, user.password_hash):
        logger.info(f"Login successful for user: {username}")
        response = RedirectResponse("/api/calculations", status_code=status.HTTP_302_FOUND)
        response.set_cookie(key="auth", value="1", httponly=True)
        response.set_cookie(key="username", value=username, httponly=True)  # demo only
        return response
    logger.warning(f"Login failed for username: {username} - invalid credentials")
    return JSONResponse({"error": "Invalid credentials."}, status_code=401)

@router.get("/logout")
def logout(request: Request):
    username = request.cookies.get("username", "unknown")
    logger.info(f"User logged out: {username}")
    response = RedirectResponse("/login", status_code=status.HTTP_302_FOUND)
    response.delete_cookie("auth")
    response.delete_cookie("username")
    return response
