# -*- coding: utf-8 -*-
"""
Autenticação JWT, hash de senhas e dependências de autorização.

O token carrega o usuário (`sub`), a empresa (`empresa_id`) e o papel (`role`);
`get_empresa_id` entrega a empresa do usuário autenticado para os serviços.
"""
from datetime import datetime, timedelta

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from gestao import database
from gestao.config import settings
from gestao.models.usuario import Usuario

PAPEIS_GESTAO = ("administrador", "gerente")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def create_access_token(data: dict):
    to_encode = data.copy()
    expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def get_user(db: Session, username: str):
    return db.query(Usuario).filter(Usuario.username == username).first()


def authenticate_user(db: Session, username: str, password: str):
    user = get_user(db, username)
    if not user or not user.hashed_password or not verify_password(password, user.hashed_password):
        return None
    return user


# --- DEPENDÊNCIAS DE AUTENTICAÇÃO E AUTORIZAÇÃO ---

def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(database.get_db)):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Credenciais inválidas", headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        username: str = payload.get("sub")
        if username is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception
    user = get_user(db, username=username)
    if user is None:
        raise credentials_exception
    return user


def get_current_active_user(current_user: Usuario = Depends(get_current_user)):
    """
    Verifica se o usuário está ativo. Bloqueia se o papel for 'pendente'.
    """
    if not current_user.ativo:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Usuário inativo.")
    if current_user.role == "pendente":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Sua conta está pendente de aprovação por um administrador."
        )
    return current_user


def exigir_papeis(*papeis):
    """Dependência que só deixa passar usuários com um dos papéis informados."""
    def verificar(current_user: Usuario = Depends(get_current_active_user)):
        if current_user.role not in papeis:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Acesso restrito a: {', '.join(papeis)}."
            )
        return current_user
    return verificar


get_admin_or_gerente = exigir_papeis(*PAPEIS_GESTAO)


def get_empresa_id(current_user: Usuario = Depends(get_current_active_user)) -> int:
    return current_user.empresa_id
