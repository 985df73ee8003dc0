import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Depends, Header, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from jose import JWTError, jwt
from passlib.context import CryptContext

import config
from content import ContentStore
from cv import experience_groups, normalise_publish_groups, normalise_skill_groups, publication_rows, summary_blocks
from datafiles import (
    DataFileReadError,
    DataFileStore,
    DataFileWriteError,
    InvalidFilename,
    VersionConflict,
    content_version,
    validate_content,
)
from page_state import PageState
from routing import resolve_route
from schemas import ResolvedProfile, SaveFileRequest, ValidationResult, WorkDetail

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# =====================
# Auth / Security Setup
# =====================
# Use pbkdf2_sha256 to avoid external bcrypt dependency issues
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class LoginRequest(BaseModel):
    email: str
    password: str

# ==================
# FastAPI app config
# ==================
app = FastAPI(title="Portfolio API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.CORS_ORIGIN],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
    expose_headers=["ETag"],
)

# =========
# Utilities
# =========

def admin_password_hash() -> str:
    return config.ADMIN_PASSWORD_HASH or pwd_context.hash(config.ADMIN_PASSWORD)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def get_current_admin(authorization: Optional[str] = Header(None)):
    if not config.ADMIN_AUTH:
        return None
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    email: str = payload.get("sub")
    role: str = payload.get("role")
    if email != config.ADMIN_EMAIL or role != "admin":
        raise HTTPException(status_code=403, detail="Forbidden")
    return {"email": email, "role": role}


def get_content_store() -> ContentStore:
    return _content_store


def get_file_store() -> DataFileStore:
    return DataFileStore(config.DATA_DIR, hidden=config.HIDDEN_FILES)


_content_store = ContentStore(config.DATA_DIR)

# ======
# Routes
# ======
@app.get("/")
def root():
    return {"status": "ok", "service": "portfolio-api"}

# Auth
@app.post("/api/auth/login", response_model=Token)
def login(data: LoginRequest):
    if data.email.lower() != config.ADMIN_EMAIL.lower() or not verify_password(data.password, admin_password_hash()):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    token = create_access_token({"sub": config.ADMIN_EMAIL, "role": "admin"})
    return Token(access_token=token)

# Site
@app.get("/api/site")
def get_site(path: str = "", hash: str = "", viewport_width: float = 1280, store: ContentStore = Depends(get_content_store)):
    route_key, work_code = resolve_route(hash=hash, path=path)
    profile = store.resolve(route_key)
    state = PageState(store.portfolio(route_key), lang=profile.lang)
    state.apply_deep_link(work_code, viewport_width)
    return {
        "routeKey": route_key,
        "workCode": work_code,
        "profile": profile.model_dump(),
        "state": state.to_dict(viewport_width),
    }

@app.get("/api/routes/{route_key}", response_model=ResolvedProfile)
def get_route(route_key: str, store: ContentStore = Depends(get_content_store)):
    return store.resolve(route_key)

@app.get("/api/routes/{route_key}/cv")
def get_route_cv(route_key: str, store: ContentStore = Depends(get_content_store)):
    profile = store.resolve(route_key)
    skills = profile.routeSkills or normalise_skill_groups(store.skills())
    return {
        "settings": profile.cvSettings.model_dump(),
        "summary": summary_blocks(profile.cvSummary),
        "experience": [g.model_dump() for g in experience_groups(store.experience(), profile.cvSettings.groups)],
        "skills": [s.model_dump() for s in skills],
        "publications": [r.model_dump() for r in publication_rows(normalise_publish_groups(store.publications()), store.work_details())],
    }

@app.get("/api/works/{code}", response_model=WorkDetail)
def get_work(code: str, store: ContentStore = Depends(get_content_store)):
    details = store.work_details()
    detail = details.get(code) or next((d for c, d in details.items() if c.lower() == code.lower()), None)
    if detail is None:
        raise HTTPException(status_code=404, detail="Not found")
    return detail

# Admin data files
@app.get("/api/data-files", response_model=List[str])
def list_data_files(files: DataFileStore = Depends(get_file_store)):
    try:
        return files.list_files()
    except DataFileReadError as exc:
        raise HTTPException(status_code=500, detail=str(exc))

@app.get("/api/data-files/{filename}", response_class=PlainTextResponse)
def read_data_file(filename: str, files: DataFileStore = Depends(get_file_store)):
    try:
        content = files.read(filename)
    except InvalidFilename:
        raise HTTPException(status_code=400, detail="Invalid filename")
    except DataFileReadError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return PlainTextResponse(content, headers={"ETag": f'"{content_version(content)}"'})

@app.get("/api/data-files/{filename}/validate", response_model=ValidationResult)
def validate_data_file(filename: str, files: DataFileStore = Depends(get_file_store)):
    try:
        content = files.read(filename)
    except InvalidFilename:
        raise HTTPException(status_code=400, detail="Invalid filename")
    except DataFileReadError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return validate_content(filename, content)

@app.post("/api/data-files/{filename}")
def save_data_file(
    filename: str,
    body: SaveFileRequest,
    response: Response,
    if_match: Optional[str] = Header(None),
    files: DataFileStore = Depends(get_file_store),
    _: Optional[dict] = Depends(get_current_admin),
):
    base_version = if_match.strip().strip('"') if if_match else body.baseVersion
    try:
        version = files.write(filename, body.content, base_version=base_version)
    except InvalidFilename:
        raise HTTPException(status_code=400, detail="Invalid filename")
    except VersionConflict as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except DataFileWriteError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    response.headers["ETag"] = f'"{version}"'
    return {"message": f"{filename} updated successfully", "version": version}
