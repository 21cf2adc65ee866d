from typing import Optional

from pydantic import BaseModel, EmailStr


class UsuarioRead(BaseModel):
    id: int
    empresa_id: int
    email: EmailStr
    username: str
    nome: Optional[str] = None
    role: str

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str
    user_info: UsuarioRead
